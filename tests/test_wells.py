"""Tests for well stir paths, well commands and nearest-well lookup."""

from __future__ import annotations

import pytest

from plot_writer.configs.loader import DrawTool, PlotConfig
from plot_writer.geometry.primitives import BLACK, Color, Point, Rectangle
from plot_writer.wells import RefillData, WellCommand, stir_path

UMBER = Color(0.5, 0.25, 0.0)
WELL = Rectangle(0.0, 0.0, 20.0, 30.0)


# ---------------------------------------------------------------------------
# Stir paths
# ---------------------------------------------------------------------------


class TestStirPath:
    def test_zigzag_between_inset_edges(self) -> None:
        assert stir_path(WELL, 4, 5.0) == [
            Point(10.0, 15.0),
            Point(15.0, 5.0),
            Point(5.0, 5.0),
            Point(15.0, 25.0),
            Point(5.0, 25.0),
            Point(10.0, 15.0),
        ]

    def test_odd_strokes_round_up(self) -> None:
        assert stir_path(WELL, 3, 5.0) == stir_path(WELL, 4, 5.0)

    @pytest.mark.parametrize("strokes,expected_len", [(1, 4), (6, 8), (10, 12)])
    def test_point_count(self, strokes: int, expected_len: int) -> None:
        path = stir_path(WELL, strokes, 2.0)
        assert len(path) == expected_len
        assert path[0] == path[-1] == WELL.center

    def test_well_smaller_than_padding_collapses_to_centre(self) -> None:
        small = Rectangle(50.0, 50.0, 10.0, 10.0)
        assert stir_path(small, 4, 6.0) == [Point(55.0, 55.0)] * 6

    def test_narrow_well_stirs_on_centre_line(self) -> None:
        narrow = Rectangle(0.0, 0.0, 10.0, 30.0)
        assert stir_path(narrow, 4, 6.0) == [
            Point(5.0, 15.0),
            Point(5.0, 6.0),
            Point(5.0, 6.0),
            Point(5.0, 24.0),
            Point(5.0, 24.0),
            Point(5.0, 15.0),
        ]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestRefillData:
    def test_dip_moves_to_centre(self) -> None:
        config = PlotConfig(tool_type=DrawTool.DIP, paint_wells={BLACK: [WELL]})
        refill = RefillData(config)
        (command,) = refill.refill_commands[BLACK]
        assert command.command_name == "refill_black_w0"
        assert command.command == "moveto 10.0 15.0 | pendown | penup"
        assert command.location == Point(10.0, 15.0)
        assert refill.stir_paths[BLACK] == [[Point(10.0, 15.0)]]

    def test_stir_draws_path(self) -> None:
        config = PlotConfig(
            tool_type=DrawTool.DIP_AND_STIR,
            paint_wells={BLACK: [WELL]},
            well_padding=5.0,
        )
        (command,) = RefillData(config).refill_commands[BLACK]
        assert command.command == (
            "draw_path [[10.0,15.0],[15.0,5.0],[5.0,5.0],"
            "[15.0,25.0],[5.0,25.0],[10.0,15.0]]"
        )

    def test_refill_options_wrap_body(self) -> None:
        config = PlotConfig(
            tool_type=DrawTool.DIP,
            paint_wells={BLACK: [WELL]},
            refill_options={"speed_pendown": 5},
        )
        (command,) = RefillData(config).refill_commands[BLACK]
        assert command.command == (
            "refill_options | moveto 10.0 15.0 | pendown | penup | default_options"
        )

    def test_names_are_tokens(self) -> None:
        config = PlotConfig(
            tool_type=DrawTool.DIP,
            palette={UMBER: "burnt umber"},
            paint_wells={UMBER: [WELL, Rectangle(50.0, 0.0, 20.0, 20.0)]},
        )
        names = [c.command_name for c in RefillData(config).refill_commands[UMBER]]
        assert names == ["refill_burnt_umber_w0", "refill_burnt_umber_w1"]

    def test_unnamed_color_uses_hex(self) -> None:
        config = PlotConfig(
            tool_type=DrawTool.DIP,
            palette={UMBER: "#804000"},
            paint_wells={UMBER: [WELL]},
        )
        (command,) = RefillData(config).refill_commands[UMBER]
        assert command.command_name == "refill_804000_w0"

    def test_wash_commands(self) -> None:
        config = PlotConfig(
            tool_type=DrawTool.DIP,
            paint_wells={BLACK: [WELL]},
            wash_wells=[Rectangle(100.0, 0.0, 20.0, 20.0)],
        )
        refill = RefillData(config)
        assert [c.command_name for c in refill.wash_commands] == ["wash_w0"]
        assert refill.wash_commands[0].command.startswith("draw_path [[110.0,10.0],")
        assert len(refill.wash_paths) == 1

    def test_small_wells_with_default_padding(self) -> None:
        small = Rectangle(50.0, 50.0, 10.0, 10.0)
        config = PlotConfig(
            tool_type=DrawTool.DIP_AND_STIR,
            paint_wells={BLACK: [small]},
            wash_wells=[small],
        )
        refill = RefillData(config)
        (command,) = refill.refill_commands[BLACK]
        assert command.command.startswith("draw_path [[55.0,55.0],")
        assert refill.wash_paths == [[Point(55.0, 55.0)] * 6]

    def test_pen_has_no_commands(self) -> None:
        config = PlotConfig(
            paint_wells={BLACK: [WELL]},
            wash_wells=[Rectangle(100.0, 0.0, 20.0, 20.0)],
        )
        refill = RefillData(config)
        assert refill.refill_commands == {}
        assert refill.wash_commands == []
        assert refill.wash_paths == []
        assert refill.definitions() == []

    def test_definitions_paint_then_wash(self) -> None:
        config = PlotConfig(
            tool_type=DrawTool.DIP,
            paint_wells={BLACK: [WELL]},
            wash_wells=[Rectangle(100.0, 0.0, 20.0, 20.0)],
        )
        definitions = RefillData(config).definitions()
        assert [d.split(" ", 1)[0] for d in definitions] == ["refill_black_w0", "wash_w0"]


class TestNearestWell:
    @pytest.fixture
    def refill(self) -> RefillData:
        return RefillData(PlotConfig(
            tool_type=DrawTool.DIP,
            paint_wells={BLACK: [Rectangle(0, 0, 10, 10), Rectangle(100, 0, 10, 10)]},
            wash_wells=[Rectangle(0, 50, 10, 10), Rectangle(100, 50, 10, 10)],
        ))

    def test_nearest_paint_well(self, refill: RefillData) -> None:
        assert refill.nearest_paint_well(BLACK, Point(90, 0)).command_name == "refill_black_w1"
        assert refill.nearest_paint_well(BLACK, Point(10, 0)).command_name == "refill_black_w0"

    def test_tie_goes_to_first(self, refill: RefillData) -> None:
        assert refill.nearest_paint_well(BLACK, Point(55, 5)).command_name == "refill_black_w0"

    def test_alpha_ignored(self, refill: RefillData) -> None:
        assert refill.nearest_paint_well(Color(0, 0, 0, 0.5), Point(0, 0)) is not None

    def test_unknown_color(self, refill: RefillData) -> None:
        assert refill.nearest_paint_well(UMBER, Point(0, 0)) is None

    def test_nearest_wash_well(self, refill: RefillData) -> None:
        assert refill.nearest_wash_well(Point(200, 60)).command_name == "wash_w1"


def test_well_command_definition() -> None:
    command = WellCommand(Point(0, 0), "wash_w0", "draw_path [[0.0,0.0],[1.0,1.0]]")
    assert command.definition == "wash_w0 draw_path [[0.0,0.0],[1.0,1.0]]"
