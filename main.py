"""
CLI entry point for Tennis Drill Planner.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

import cv2

from drill_planner.editor.session import EditorSession
from drill_planner.editor.window import InteractiveEditor
from drill_planner.errors import DrillPlannerError
from drill_planner.exporter import Exporter
from drill_planner.models.elements import elements_from_dicts
from drill_planner.playback.preview import AnimationPreview
from drill_planner.rally.compiler import RallyCompiler
from drill_planner.storage.repository import DrillRepository
from drill_planner.visualizer import CourtVisualizer
from drill_planner import config


# Arrow keys as reported by cv2.waitKeyEx on GTK / Windows
_LEFT_KEYS  = (81, 65361, 2424832, ord(','))
_RIGHT_KEYS = (83, 65363, 2555904, ord('.'))


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Tennis drill planning, rally animation and practice",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--db",
        default=str(config.DATABASE_PATH),
        help="SQLite database holding drills and routines"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("timeline", help="Print the compiled rally timeline of a drill file")
    p.add_argument("drill", help="Drill JSON file")
    p.add_argument("--json", action="store_true", help="Print the timeline as JSON")

    p = sub.add_parser("render", help="Render a drill's animation to video")
    p.add_argument("drill", help="Drill JSON file")
    p.add_argument("--output", "-o", default=str(config.RESULTS_DIR), help="Output directory")
    p.add_argument("--name", "-n", default=None, help="Base name for output files (default: drill filename)")
    p.add_argument("--quiet", "-q", action="store_true", help="Suppress progress bar")

    p = sub.add_parser("preview", help="Play a drill's rally in a window")
    p.add_argument("drill", help="Drill JSON file")

    p = sub.add_parser("edit", help="Open the interactive drill editor")
    p.add_argument("--drill", type=int, default=None, help="Id of a stored drill to edit")
    p.add_argument("--copy", action="store_true", help="Start from a copy of --drill instead of editing it")
    p.add_argument("--name", default=None, help="Drill name")
    p.add_argument("--description", default=None, help="Drill description")
    p.add_argument("--duration", type=float, default=None, help="Drill duration in minutes")

    sub.add_parser("list", help="List stored drills and routines")

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s | %(levelname)8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )


# ── Commands ──────────────────────────────────────────────────────────────────

def cmd_timeline(args) -> None:
    drill = Exporter.load_drill(args.drill)
    timeline = RallyCompiler().compile(elements_from_dicts(drill.court_elements))

    if args.json:
        print(json.dumps(timeline.to_dict(), indent=2))
        return

    print(f"[Timeline] {drill.name}: {len(timeline)} events, "
          f"{timeline.total_duration_ms / 1000:.2f}s")
    for event in timeline:
        element = event.element
        detail = getattr(element, "shot_type", "move")
        print(f"  {event.start_time_ms:8.0f}ms  +{event.duration_ms:6.0f}ms  "
              f"{event.kind.value:<8} P{element.player_id} {detail:<9} "
              f"({event.origin[0]:.0f},{event.origin[1]:.0f}) → "
              f"({event.target[0]:.0f},{event.target[1]:.0f})")


def cmd_render(args) -> None:
    drill = Exporter.load_drill(args.drill)
    elements = elements_from_dicts(drill.court_elements)
    name = args.name or Path(args.drill).stem

    exporter = Exporter(args.output)
    visualizer = CourtVisualizer()
    print(f"[Render] {drill.name} → {exporter.output_dir}")

    png = exporter.save_frame(visualizer.draw_static_court(elements), f"{name}.png")
    print(f"[Render] Court image: {png}")
    video = exporter.render_animation(elements, f"{name}.mp4", visualizer,
                                      show_progress=not args.quiet)
    print(f"[Render] Animation: {video}")


def cmd_preview(args) -> None:
    drill = Exporter.load_drill(args.drill)
    elements = elements_from_dicts(drill.court_elements)
    visualizer = CourtVisualizer()
    window = config.PREVIEW_WINDOW_NAME

    print("[Preview] SPACE play/pause, R reset, ←/→ seek, Q quit")
    with AnimationPreview(lambda _frame: None) as preview:
        preview.open(elements)
        preview.play()
        cv2.namedWindow(window, cv2.WINDOW_AUTOSIZE)
        try:
            while True:
                frame = preview.last_frame
                if frame is not None:
                    cv2.imshow(window, visualizer.draw_frame(frame, preview.total_duration_ms))
                key = cv2.waitKeyEx(config.TICK_INTERVAL_MS)
                if key == -1:
                    continue
                if key in (ord('q'), 27):
                    break
                elif key == 32:
                    preview.toggle()
                elif key == ord('r'):
                    preview.reset()
                elif key in _LEFT_KEYS:
                    preview.step(-config.SEEK_STEP_MS)
                elif key in _RIGHT_KEYS:
                    preview.step(config.SEEK_STEP_MS)
        finally:
            cv2.destroyWindow(window)


def cmd_edit(args) -> None:
    repository = DrillRepository(args.db)
    session = EditorSession()

    if args.drill is not None:
        drill = repository.get_drill(args.drill)
        if drill is None:
            print(f"Error: Drill {args.drill} not found in {args.db}")
            sys.exit(1)
        if args.copy:
            session.replicate_drill(drill)
        else:
            session.load_drill(drill)

    if args.name is not None:
        session.name = args.name
    if args.description is not None:
        session.description = args.description
    if args.duration is not None:
        session.duration_minutes = args.duration

    print("[Editor] P player, S shot, M move, T shot type, U/Y undo/redo, "
          "F flip, C clear, A animate, W save, Q quit")
    saved = InteractiveEditor(session, repository).run()
    if saved is not None:
        print(f"[Editor] Saved drill {saved.id}: {saved.name}")


def cmd_list(args) -> None:
    repository = DrillRepository(args.db)
    drills = repository.list_drills()
    routines = repository.list_routines()

    print(f"--- Drills ({len(drills)}) ---")
    for d in drills:
        print(f"  [{d.id}] {d.name}  {d.duration_minutes:g} min  "
              f"{len(d.court_elements)} elements")
    print(f"--- Routines ({len(routines)}) ---")
    for r in routines:
        print(f"  [{r.id}] {r.name}  drills: {', '.join(str(i) for i in r.drill_ids) or '-'}")


COMMANDS = {
    "timeline": cmd_timeline,
    "render":   cmd_render,
    "preview":  cmd_preview,
    "edit":     cmd_edit,
    "list":     cmd_list,
}


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    if hasattr(args, "drill") and isinstance(args.drill, str) and not Path(args.drill).exists():
        print(f"Error: Drill file not found: {args.drill}")
        sys.exit(1)

    try:
        COMMANDS[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        sys.exit(0)
    except DrillPlannerError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
