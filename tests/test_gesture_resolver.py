import pytest

from polygon_annotator.interaction import GestureMode, PointerButton, ToolMode
from polygon_annotator.interaction.gesture_resolver import PointerGestureResolver
from polygon_annotator.model.polygon import PolygonBuilder
from polygon_annotator.model.viewport import AffineViewport, ImageDimensions


@pytest.fixture
def viewport():
    vp = AffineViewport()
    vp.resize((800, 600))
    vp.load_image(ImageDimensions(2000, 2000))
    vp.set_transform(1.0, (-500.0, -500.0))
    return vp


@pytest.fixture
def polygon():
    return PolygonBuilder()


@pytest.fixture
def resolver(viewport, polygon):
    return PointerGestureResolver(viewport, polygon)


def test_short_click_adds_vertex_at_release_point(resolver, viewport, polygon):
    down = resolver.on_pointer_down((100.0, 100.0))
    assert down.kind == "pending_click"
    assert resolver.mode is GestureMode.PENDING_CLICK

    result = resolver.on_pointer_up((101.0, 101.0))

    assert result.kind == "vertex_added"
    assert result.payload == pytest.approx(viewport.to_world((101.0, 101.0)))
    assert polygon.points == ((601.0, 601.0),)
    assert resolver.mode is GestureMode.IDLE


def test_drag_past_threshold_pans_instead_of_adding(resolver, viewport, polygon):
    resolver.on_pointer_down((100.0, 100.0))

    result = resolver.on_pointer_move((110.0, 100.0))

    assert result.kind == "pan"
    assert result.payload == (10.0, 0.0)
    assert resolver.mode is GestureMode.PANNING
    assert viewport.offset == pytest.approx((-490.0, -500.0))
    assert viewport.user_transform_active is True

    assert resolver.on_pointer_up((110.0, 100.0)).kind == "stop_pan"
    assert polygon.points == ()


def test_jitter_within_threshold_still_counts_as_click(resolver, viewport, polygon):
    resolver.on_pointer_down((100.0, 100.0))

    assert resolver.on_pointer_move((102.0, 102.0)).kind == "noop"
    assert resolver.on_pointer_move((104.0, 100.0)).kind == "noop"
    assert resolver.mode is GestureMode.PENDING_CLICK
    assert viewport.offset == pytest.approx((-500.0, -500.0))

    resolver.on_pointer_up((103.0, 100.0))

    assert polygon.points == ((603.0, 600.0),)


def test_pan_applies_incremental_deltas(resolver, viewport):
    resolver.on_pointer_down((100.0, 100.0))
    resolver.on_pointer_move((100.0, 106.0))
    second = resolver.on_pointer_move((90.0, 110.0))

    assert second.payload == (-10.0, 4.0)
    assert viewport.offset == pytest.approx((-510.0, -490.0))


def test_pending_click_does_not_set_latch_before_drag(resolver, viewport):
    resolver.on_pointer_down((100.0, 100.0))
    resolver.on_pointer_up((100.0, 100.0))

    assert viewport.user_transform_active is False


@pytest.mark.parametrize(
    "button, modifiers",
    [
        (PointerButton.RIGHT, False),
        (PointerButton.MIDDLE, False),
        (PointerButton.OTHER, False),
        (PointerButton.LEFT, True),
    ],
)
def test_other_buttons_and_modifiers_pan_immediately(resolver, viewport, polygon, button, modifiers):
    result = resolver.on_pointer_down((100.0, 100.0), button, modifiers)

    assert result.kind == "start_pan"
    assert resolver.mode is GestureMode.PANNING
    assert viewport.user_transform_active is True

    resolver.on_pointer_move((101.0, 100.0))
    assert viewport.offset == pytest.approx((-499.0, -500.0))
    resolver.on_pointer_up((101.0, 100.0))
    assert polygon.points == ()


def test_move_tool_never_adds_vertices(resolver, polygon):
    resolver.tool_mode = ToolMode.MOVE

    assert resolver.on_pointer_down((100.0, 100.0)).kind == "start_pan"
    assert resolver.on_pointer_up((100.0, 100.0)).kind == "stop_pan"
    assert polygon.points == ()


def test_closed_polygon_turns_clicks_into_pans(resolver, polygon):
    for point in [(0.0, 0.0), (10.0, 0.0), (5.0, 8.0)]:
        polygon.add_vertex(point)
    polygon.close()

    assert resolver.on_pointer_down((100.0, 100.0)).kind == "start_pan"
    resolver.on_pointer_up((100.0, 100.0))
    assert len(polygon) == 3


def test_tool_switch_during_pending_click_blocks_vertex(resolver, polygon):
    resolver.on_pointer_down((100.0, 100.0))
    resolver.tool_mode = ToolMode.MOVE

    assert resolver.on_pointer_up((100.0, 100.0)).kind == "noop"
    assert polygon.points == ()


def test_leave_discards_pending_gesture(resolver, polygon):
    resolver.on_pointer_down((100.0, 100.0))

    assert resolver.on_pointer_leave().kind == "cancelled"
    assert resolver.mode is GestureMode.IDLE
    assert resolver.on_pointer_up((100.0, 100.0)).kind == "noop"
    assert polygon.points == ()


def test_leave_ends_pan(resolver, viewport):
    resolver.on_pointer_down((100.0, 100.0), PointerButton.RIGHT)
    resolver.on_pointer_leave()

    assert resolver.on_pointer_move((150.0, 150.0)).kind == "noop"
    assert viewport.offset == pytest.approx((-500.0, -500.0))


def test_idle_move_and_leave_are_noops(resolver):
    assert resolver.on_pointer_move((5.0, 5.0)).kind == "noop"
    assert resolver.on_pointer_leave().kind == "noop"


def test_custom_threshold(viewport, polygon):
    resolver = PointerGestureResolver(viewport, polygon, drag_threshold=20.0)
    resolver.on_pointer_down((100.0, 100.0))

    assert resolver.on_pointer_move((110.0, 110.0)).kind == "noop"
    assert resolver.on_pointer_move((120.0, 115.0)).kind == "pan"
