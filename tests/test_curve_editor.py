import pytest

from flite_editor.processing.curve_editor import CurveEditorController, Dragging, Idle
from flite_editor.processing.curves import CurveModel
from flite_editor.utils.errors import EditResult


@pytest.fixture
def editor():
    """Controller over a single CurveModel, recording checkpoints and changes."""
    model = CurveModel()
    checkpoints = []
    changes = []
    controller = CurveEditorController(
        curves_provider=lambda: model,
        checkpoint=checkpoints.append,
        on_change=changes.append,
    )
    controller.model = model
    controller.checkpoints = checkpoints
    controller.changes = changes
    return controller


def test_hit_test_uses_radius(editor):
    assert editor.hit_test(5, 5) == 0
    assert editor.hit_test(250, 252) == 1
    assert editor.hit_test(20, 0) is None
    assert editor.hit_test(128, 128) is None


def test_click_on_empty_space_adds_point_and_starts_drag(editor):
    assert editor.pointer_down(128, 100) is EditResult.OK
    assert editor.model.points('rgb') == [(0, 0), (128, 100), (255, 255)]
    assert editor.state == Dragging('rgb', 1, checkpointed=True)
    assert editor.checkpoints == ["add curve point"]


def test_add_and_drag_is_one_checkpoint(editor):
    editor.pointer_down(128, 100)
    editor.pointer_move(130, 140)
    editor.pointer_move(135, 160)
    editor.pointer_up()
    assert editor.checkpoints == ["add curve point"]
    assert editor.model.points('rgb')[1] == (135, 160)
    assert editor.state == Idle()


def test_dragging_existing_point_checkpoints_on_first_move(editor):
    editor.model.add_point('rgb', 128, 128)
    assert editor.pointer_down(130, 126) is EditResult.OK
    assert editor.checkpoints == []
    editor.pointer_move(128, 180)
    editor.pointer_move(128, 190)
    assert editor.checkpoints == ["move curve point"]
    assert editor.model.points('rgb')[1] == (128, 190)


def test_click_without_move_records_nothing(editor):
    editor.model.add_point('rgb', 128, 128)
    editor.pointer_down(128, 128)
    editor.pointer_up()
    assert editor.checkpoints == []


def test_dragged_endpoint_keeps_its_x(editor):
    editor.pointer_down(0, 0)
    editor.pointer_move(80, 40)
    assert editor.model.points('rgb')[0] == (0, 40)


def test_pointer_up_normalizes_crossed_points(editor):
    editor.model.add_point('rgb', 64, 64)
    editor.model.add_point('rgb', 192, 192)
    editor.pointer_down(64, 64)
    editor.pointer_move(220, 100)
    assert not editor.model.is_sorted('rgb')
    editor.pointer_up()
    assert editor.model.points('rgb') == [(0, 0), (192, 192), (220, 100), (255, 255)]


def test_full_curve_rejects_new_points(editor):
    for x in range(20, 180, 20):
        editor.model.add_point('rgb', x, x)
    assert editor.model.is_full('rgb')
    before = editor.model.points('rgb')
    assert editor.pointer_down(250, 10) is EditResult.CURVE_FULL
    assert editor.model.points('rgb') == before
    assert editor.checkpoints == []
    assert editor.state == Idle()


def test_duplicate_x_is_rejected(editor):
    editor.model.add_point('rgb', 100, 100)
    assert editor.pointer_down(100, 200) is EditResult.DUPLICATE_X
    assert editor.model.point_count('rgb') == 3


def test_double_click_deletes_interior_point(editor):
    editor.model.add_point('rgb', 128, 60)
    assert editor.double_click(128, 62) is EditResult.OK
    assert editor.model.is_identity('rgb')
    assert editor.checkpoints == ["delete curve point"]


def test_double_click_on_endpoint_is_locked(editor):
    assert editor.double_click(1, 1) is EditResult.ENDPOINT_LOCKED
    assert editor.model.point_count('rgb') == 2
    assert editor.checkpoints == []


def test_double_click_on_nothing(editor):
    assert editor.double_click(128, 10) is EditResult.NO_POINT


def test_double_click_while_dragging_deletes_dragged_point(editor):
    editor.pointer_down(100, 50)
    assert editor.double_click(0, 0) is EditResult.OK
    assert editor.model.is_identity('rgb')
    assert editor.state == Idle()


def test_channel_switch_is_not_an_edit(editor):
    assert editor.select_channel('g') is EditResult.OK
    assert editor.channel == 'g'
    editor.pointer_down(128, 30)
    assert editor.model.point_count('g') == 3
    assert editor.model.is_identity('rgb')
    assert editor.checkpoints == ["add curve point"]


def test_unknown_channel_raises(editor):
    with pytest.raises(ValueError):
        editor.select_channel('alpha')


def test_reset_channel(editor):
    editor.model.add_point('rgb', 128, 60)
    assert editor.reset_channel() is EditResult.OK
    assert editor.model.is_identity('rgb')
    assert editor.checkpoints == ["reset curve"]
    # Resetting an identity curve records nothing
    editor.reset_channel()
    assert editor.checkpoints == ["reset curve"]


def test_move_without_drag(editor):
    assert editor.pointer_move(10, 10) is EditResult.NO_POINT


def test_on_change_reports_channel(editor):
    editor.select_channel('b')
    editor.pointer_down(128, 10)
    assert editor.changes == ['b']


def test_no_image_selected():
    controller = CurveEditorController(curves_provider=lambda: None, checkpoint=lambda d: None)
    assert controller.pointer_down(10, 10) is EditResult.NO_IMAGE
    assert controller.double_click(10, 10) is EditResult.NO_IMAGE
    assert controller.reset_channel() is EditResult.NO_IMAGE
    assert controller.hit_test(0, 0) is None
