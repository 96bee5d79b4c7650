"""
MonArena CLI - Command-line interface for the engine.

Usage:
    monarena serve [--host H] [--port P]           Run the HTTP API
    monarena commit MOVE_ID ROUND BATTLE_ID [SALT] Print a move commitment
    monarena demo [--wager N] [--move M]           Play a scripted battle
    monarena catalog                               Print species and moves
"""

import argparse
import logging
import os
import sys

from .logging_config import setup_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="MonArena - Wagered creature battles",
        prog="monarena",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("MONARENA_LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # Commit command
    commit_parser = subparsers.add_parser("commit", help="Compute a move commitment")
    commit_parser.add_argument("move_id", type=int, help="Move id (0-255)")
    commit_parser.add_argument("round", type=int, help="Battle round (turn // 4)")
    commit_parser.add_argument("battle_id", type=int, help="Battle id")
    commit_parser.add_argument(
        "salt", nargs="?", default=None,
        help="Salt as integer or 0x-hex (random if omitted)",
    )

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Play a scripted battle between two starters")
    demo_parser.add_argument("--wager", type=int, default=69)
    demo_parser.add_argument("--move", type=int, default=100, help="Move both sides use")

    # Catalog command
    subparsers.add_parser("catalog", help="Print species and moves")

    args = parser.parse_args(argv)
    setup_logging(getattr(logging, str(args.log_level).upper(), logging.INFO))

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "commit":
        cmd_commit(args)
    elif args.command == "demo":
        cmd_demo(args)
    elif args.command == "catalog":
        cmd_catalog(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("monarena.api.app:app", host=args.host, port=args.port, log_config=None)


def cmd_commit(args):
    """Print a commitment (and the salt, so it can be revealed later)."""
    from .api.service import parse_salt
    from .engine_core import ArenaError, make_commitment, generate_salt

    try:
        salt = parse_salt(args.salt) if args.salt is not None else generate_salt()
        commitment = make_commitment(args.move_id, args.round, args.battle_id, salt)
    except ArenaError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"commitment: {commitment}")
    print(f"salt:       {salt}")


def cmd_demo(args):
    """Play a full battle between two fresh players with fixed moves."""
    from .arena import Arena
    from .engine_core import ArenaError, BattleStatus, make_commitment

    arena = Arena()
    challenger, opponent = "challenger", "opponent"
    salts = {challenger: 1234, opponent: 5678}

    try:
        arena.enroll(challenger, 1)
        arena.enroll(opponent, 2)
        battle_id = arena.challenge(challenger, opponent, args.wager)
        battle = arena.accept_challenge(opponent, battle_id)

        while battle.status != BattleStatus.FINISHED:
            round_index = battle.round
            for who in (challenger, opponent):
                commitment = make_commitment(args.move, round_index, battle_id, salts[who])
                arena.submit_move_commitment(who, commitment, battle_id)
            for who in (challenger, opponent):
                result = arena.submit_move_decommitment(who, args.move, battle_id, salts[who])

            outcome = result.round_outcome
            print(
                f"Round {outcome.round_index}: damage {outcome.damage[0]}/{outcome.damage[1]}, "
                f"hp {outcome.hp_after[0]}/{outcome.hp_after[1]}"
            )
            battle = arena.get_battle(battle_id)
    except ArenaError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\nWinner: {battle.winner or 'draw'}")
    for who in (challenger, opponent):
        player = arena.get_player(who)
        print(f"  {who}: money={player.money} exp={player.active_creature.experience}")


def cmd_catalog(args):
    """Print the species and move tables."""
    from .catalog import SPECIES, MOVES

    print("Species:")
    for s in SPECIES.values():
        print(f"  {s.id:>3} {s.name:<12} hp={s.hp} atk={s.attack} def={s.defense} spd={s.speed}")
    print("\nMoves:")
    for m in sorted(MOVES.values(), key=lambda m: m.id):
        print(f"  {m.id:>3} {m.name:<12} power={m.power}")


if __name__ == "__main__":
    main()
