"""
Clash of Isles - a small island settlement builder.

Usage:
    python main.py                      # windowed game
    python main.py --headless --seconds 120 --huts 3 --mills 1 --raid-hits 5
"""
import argparse
import logging
import sys

from config import LOG_LEVEL, SAVE_SLOT, ACCRUAL_PERIOD_MS


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Clash of Isles - island settlement builder"
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the simulation without a window, logging display events"
    )
    parser.add_argument("--seconds", type=float, default=60.0, help="simulated seconds (headless)")
    parser.add_argument("--huts", type=int, default=2, help="huts to place at start (headless)")
    parser.add_argument("--mills", type=int, default=0, help="mills to place at start (headless)")
    parser.add_argument("--raid-hits", type=int, default=0, help="start a raid and land this many hits (headless)")
    parser.add_argument("--open", action="store_true", help="open the play screen (fractional accrual) (headless)")
    parser.add_argument("--save-dir", type=str, default=None, help="directory for save slots")
    parser.add_argument("--slot", type=str, default=SAVE_SLOT, help="save slot name")
    parser.add_argument("--no-audio", action="store_true", help="disable ambient audio")
    parser.add_argument("--log-level", type=str, default=LOG_LEVEL, help="logging level (default: %(default)s)")
    return parser.parse_args(argv)


def run_headless(args) -> int:
    """Drive the session on simulated time; returns a process exit code."""
    from game.persistence import JsonFileStore, MemoryStore
    from game.session import GameSession
    from game.sim.timebase import set_sim_now_ms
    from game.ui.console import ConsoleDisplay

    set_sim_now_ms(0)
    store = JsonFileStore(args.save_dir) if args.save_dir else MemoryStore()
    session = GameSession(display=ConsoleDisplay(), store=store, slot=args.slot, now_ms=0)
    if args.open:
        session.open_game()

    for i in range(args.huts):
        session.place("hut", (i * 3, 0))
    for i in range(args.mills):
        session.place("mill", (i * 3, 4))

    if args.raid_hits > 0:
        session.request_raid_start()
        for _ in range(args.raid_hits):
            session.request_raid_hit()

    end_ms = int(args.seconds * 1000)
    now = 0
    while now < end_ms:
        now = min(end_ms, now + ACCRUAL_PERIOD_MS)
        set_sim_now_ms(now)
        session.update(now)

    if args.save_dir:
        session.request_save()

    state = session.get_game_state()
    print(
        f"after {args.seconds:g}s: timber={state['timber']:.2f} rate={state['rate_display']}/s "
        f"tide={state['tide']} buildings={state['buildings']}"
    )
    session.close()
    return 0


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.headless:
        return run_headless(args)

    from config import SAVE_DIR
    from game.engine import GameEngine

    print("=" * 50)
    print("  Clash of Isles")
    print("=" * 50)
    print()
    print("Controls:")
    print("  1         - Select Hut (10 timber)")
    print("  2         - Select Mill (30 timber)")
    print("  Click     - Place on ground / upgrade a building / hit during a raid")
    print("  A         - Start Raid")
    print("  R         - Remove last building")
    print("  S / L     - Save / Load")
    print("  Esc       - Quit")
    print()

    game = GameEngine(save_dir=args.save_dir or SAVE_DIR, slot=args.slot, audio=not args.no_audio)
    game.run()

    print("Thanks for playing!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
