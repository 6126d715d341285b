import argparse
import json
import logging
import os
import sys
import time

# Ensure project root is in path so we can import 'mazemin' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mazemin.algo.registry import GENERATORS, create_generator
from mazemin.algo.solvers import AStar, BFS
from mazemin.core.complexity import MazeStats
from mazemin.core.errors import MazeError
from mazemin.core.grid import Grid
from mazemin.core.openings import DX, DY, walk_is_open
from mazemin.game.engine import first_divergence, hint_segment
from mazemin.game.session import GameConfig, GameSession, history_recorder
from mazemin.io.history import HistoryStore
from mazemin.io.moves import moves_from_text, moves_to_text
from mazemin.io.payload import PayloadDecoder
from mazemin.io.record import (
    DIFFICULTIES,
    GRID_FORMATS,
    SKILL_TIERS,
    append_to_feed,
    build_record,
    decode_record,
    load_feed,
    load_record,
    save_record,
)

logger = logging.getLogger("mazemin")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def load_records(path):
    """A .jsonl path is a feed; anything else is a single record file."""
    if path.endswith(".jsonl"):
        return load_feed(path, fallback=None)
    return [load_record(path)]


def payload_strategy(decoder: PayloadDecoder, payload: str) -> str:
    result = decoder.decode(payload)
    return result.strategy if result.ok else "legacy"


def cmd_generate(args):
    logger.info(f"Generating {args.width}x{args.height} maze with {GENERATORS[args.algo].label}...")
    grid = Grid(args.width, args.height)
    generator = create_generator(args.algo, grid, seed=args.seed)
    solver = AStar(grid)

    if args.visual:
        from mazemin.viz.renderer import Renderer
        logger.info("Visual mode enabled - Opening window...")
        renderer = Renderer(grid, generator=generator, solver=solver, speed=args.speed)
        renderer.init_window()
        renderer.run_loop()
        if not solver.path:
            logger.warning("Visualization closed early, nothing exported")
            return 1
    else:
        t0 = time.time()
        generator.run_all()
        logger.info(f"Generation complete in {time.time() - t0:.4f}s ({generator.step_count} steps)")

    if not solver.path:
        solver.run_all()
    logger.info(f"Solution length: {solver.solution_length}")
    logger.info(f"Stats: {MazeStats.calculate_stats(grid)}")

    record = build_record(grid, args.algo, path=solver.path, hints=solver.hints,
                          skill_tier=args.skill_tier, difficulty=args.difficulty, fmt=args.format)

    if args.out:
        out = save_record(record, args.out)
        logger.info(f"Saved puzzle to {out}")
    if args.feed:
        append_to_feed(record, args.feed)
        logger.info(f"Appended puzzle to {args.feed}")
    if not args.out and not args.feed:
        print(json.dumps(record.to_dict(), separators=(",", ":")))


def cmd_inspect(args):
    decoder = PayloadDecoder()
    records = load_records(args.input_file)
    if not records:
        print("No puzzles found.")
        return 1

    for record in records:
        print(f"{record.record_id}: {record.w}x{record.h} L={record.L} hints={record.hints}")
        print(f"  grid payload: {payload_strategy(decoder, record.g)}")
        print(f"  path payload: {payload_strategy(decoder, record.p)}")
        try:
            puzzle = decode_record(record, decoder=decoder)
        except MazeError as exc:
            print(f"  decode failed: {exc}")
            continue

        for y in range(record.h):
            row = puzzle.openings[y * record.w:(y + 1) * record.w]
            print("  " + " ".join(f"{mask:2d}" for mask in row))
        print(f"  moves: {moves_to_text(puzzle.moves)} ({len(puzzle.moves)})")
        valid = walk_is_open(puzzle.openings, record.w, record.h, puzzle.moves)
        reaches = puzzle.solution_cells()[-1] == puzzle.goal
        print(f"  reference path: {'valid' if valid else 'INVALID'}, "
              f"{'reaches' if reaches else 'does not reach'} goal")
    return 0


def cmd_play(args):
    records = load_records(args.input_file)
    if not 0 <= args.index < len(records):
        print(f"No puzzle at index {args.index} ({len(records)} loaded).")
        return 1
    puzzle = decode_record(records[args.index])

    config = GameConfig()
    on_complete = None
    if args.history:
        on_complete = history_recorder(HistoryStore(args.history, limit=config.history_limit))
    session = GameSession(puzzle, config=config, on_complete=on_complete)

    for n, move in enumerate(moves_from_text(args.moves)):
        x, y = session.state.cursor
        target = (x + DX[move], y + DY[move])
        if not session.move_to(target):
            print(f"Move {n + 1} ({'NESW'[move]}) from {(x, y)} rejected.")
            break
        if session.state.completed:
            break

    state = session.state
    divergence = first_divergence(state.moves, session.reference)
    print(f"Position: {state.cursor}  moves: {len(state.moves)}")
    print(f"Divergence: {divergence}  progress: {state.progress}/{len(session.reference)}")
    if state.completed:
        print(f"Completed with {state.stars} stars.")
    else:
        window = hint_segment(session.reference, state.progress, state.divergence, puzzle.record.L,
                              config.hint_window, config.short_hint_window)
        print(f"Next hint window: {moves_to_text(window) or '-'}")
    return 0


def cmd_benchmark(args):
    logger.info(f"Running benchmark: {args.count} mazes of {args.size}x{args.size} per algorithm")
    print(f"\n{'ALGORITHM':<28} | {'GEN (s)':<10} | {'SOLVE (s)':<10} | {'AVG LEN':<10} | {'A*=BFS':<6}")
    print("-" * 76)

    mismatches = 0
    for code, cls in GENERATORS.items():
        gen_time = solve_time = 0.0
        total_len = 0
        agree = True
        for seed in range(args.count):
            grid = Grid(args.size, args.size)
            t0 = time.time()
            cls(grid, seed=seed).run_all()
            gen_time += time.time() - t0

            t0 = time.time()
            astar = AStar(grid)
            astar.run_all()
            solve_time += time.time() - t0

            bfs = BFS(grid)
            bfs.run_all()
            if astar.solution_length != bfs.solution_length:
                agree = False
                mismatches += 1
                logger.warning(f"{code} seed {seed}: A* {astar.solution_length} != BFS {bfs.solution_length}")
            total_len += astar.solution_length

        name = f"{cls.label} ({code})"
        print(f"{name:<28} | {gen_time:<10.4f} | {solve_time:<10.4f} | "
              f"{total_len / args.count:<10.1f} | {'yes' if agree else 'NO':<6}")
    return 1 if mismatches else 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="mazemin: puzzle maze authoring and play core")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate, solve and export a puzzle")
    gen_parser.add_argument("--width", type=int, default=10, help="Maze Width")
    gen_parser.add_argument("--height", type=int, default=10, help="Maze Height")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--algo", type=str, default="rb", choices=sorted(GENERATORS), help="Generation Algorithm")
    gen_parser.add_argument("--format", type=str, default="compressed", choices=GRID_FORMATS, help="Payload format")
    gen_parser.add_argument("--skill-tier", type=str, default="beginner", choices=SKILL_TIERS)
    gen_parser.add_argument("--difficulty", type=str, default="easy", choices=DIFFICULTIES)
    gen_parser.add_argument("--out", type=str, help="Output file or directory (optional)")
    gen_parser.add_argument("--feed", type=str, help="Append the record to a JSON-lines feed")
    gen_parser.add_argument("--visual", action="store_true", help="Show visualization")
    gen_parser.add_argument("--speed", type=int, default=3, choices=range(1, 6), help="Animation speed (1 slow - 5 fast)")

    # Inspect Command
    inspect_parser = subparsers.add_parser("inspect", help="Decode a puzzle record or feed")
    inspect_parser.add_argument("input_file", help="Record (.json) or feed (.jsonl)")

    # Play Command
    play_parser = subparsers.add_parser("play", help="Replay a move string against a puzzle")
    play_parser.add_argument("input_file", help="Record (.json) or feed (.jsonl)")
    play_parser.add_argument("moves", help="Moves as letters, e.g. ESSE")
    play_parser.add_argument("--index", type=int, default=0, help="Puzzle index within a feed")
    play_parser.add_argument("--history", type=str, help="History file to record a completed run")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Generate and solve mazes with every algorithm")
    bench_parser.add_argument("--size", type=int, default=30, help="Benchmark size")
    bench_parser.add_argument("--count", type=int, default=10, help="Mazes per algorithm")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")
    commands = {
        "generate": cmd_generate,
        "inspect": cmd_inspect,
        "play": cmd_play,
        "benchmark": cmd_benchmark,
    }
    try:
        return commands[args.command](args) or 0
    except (MazeError, OSError) as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
