"""
Gem Duel CLI - Command-line interface for the engine.

Usage:
    gemduel simulate [--seed N] [--buff-level L] [-o log.json]
                                   Play a bot-vs-bot match
    gemduel replay <log_file>      Replay an action log and summarize it
    gemduel checksum <log_file>    Print the sync checksum of a replayed log
"""

import argparse
import logging
import sys

from .config import get_log_level

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Gem Duel - Deterministic two-player rules engine",
        prog="gemduel",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a bot-vs-bot match")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Setup and bot seed")
    simulate_parser.add_argument("--buff-level", type=int, choices=[1, 2, 3], help="Start with a buff draft")
    simulate_parser.add_argument("--max-actions", type=int, default=2000, help="Stop after this many actions")
    simulate_parser.add_argument("--output", "-o", help="Write the action log to this file")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay an action log")
    replay_parser.add_argument("log_file", help="Path to a JSON action log")

    # Checksum command
    checksum_parser = subparsers.add_parser("checksum", help="Checksum of a replayed log")
    checksum_parser.add_argument("log_file", help="Path to a JSON action log")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "replay":
        cmd_replay(args)
    elif args.command == "checksum":
        cmd_checksum(args)
    else:
        parser.print_help()
        sys.exit(1)


def _load_log(path):
    from .session import ActionLog

    try:
        return ActionLog.load(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


def _print_summary(state):
    from .engine_core.selectors import crown_count, player_score
    from .network import generate_state_hash

    if state is None:
        print("No game state")
        return
    print(f"Turn: {state.turn}")
    print(f"Phase: {state.effective_phase.value}")
    for pid in ("p1", "p2"):
        buff = state.player_buffs[pid].buff_id
        print(f"{pid}: {player_score(state, pid)} points, {crown_count(state, pid)} crowns, buff {buff}")
    print(f"Winner: {state.winner or '-'}")
    print(f"Checksum: {generate_state_hash(state)}")


def cmd_simulate(args):
    """Play a bot-vs-bot match."""
    from .engine_core.state import GameMode
    from .session import GameLoop, SessionManager

    manager = SessionManager()
    session = manager.create_session(
        seed=args.seed,
        mode=GameMode.PVE,
        buff_level=args.buff_level,
        bot_players=["p1", "p2"],
    )
    loop = GameLoop(session)

    actions = 0
    while actions < args.max_actions:
        result = loop.run_bots(max_actions=args.max_actions - actions)
        actions += len(result.bot_actions)
        if result.winner or not result.success or not result.bot_actions:
            break

    print(f"Actions: {session.log.cursor}")
    _print_summary(session.game_state)

    if args.output:
        session.log.save(args.output)
        print(f"Log written to {args.output}")


def cmd_replay(args):
    """Replay an action log and summarize the final state."""
    log = _load_log(args.log_file)
    print(f"Actions: {log.cursor}")
    _print_summary(log.current_state)


def cmd_checksum(args):
    """Print the sync checksum of a replayed log."""
    from .network import generate_state_hash

    log = _load_log(args.log_file)
    print(generate_state_hash(log.current_state))


if __name__ == "__main__":
    main()
