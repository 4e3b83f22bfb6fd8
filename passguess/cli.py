"""CLI for PassGuess: score a password, show or change settings."""

import argparse
import sys

from rich import print
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import (
    DEFAULTS,
    load_config,
    options_from_config,
    parse_config_value,
    save_config,
    setup_logging,
)
from .errors import InvalidInput
from .evaluator import estimate
from .serialization import dumps
from .tables import build_tables, get_tables, load_frequency_lists
from .time_estimates import score_label


def _tables_for(cfg):
    path = cfg.get("frequency_lists")
    if path:
        return build_tables(load_frequency_lists(path))
    return get_tables()


def cmd_score(args):
    cfg = load_config(args.config)
    setup_logging("DEBUG" if args.verbose else cfg.get("log_level", "WARNING"))
    try:
        options = options_from_config(cfg)
    except ValueError as e:
        print(f"[red]Invalid config: {e}[/red]")
        return 2
    try:
        result = estimate(args.password, user_inputs=args.user_input, options=options, tables=_tables_for(cfg))
    except InvalidInput as e:
        print(f"[red]Invalid password: {e}[/red]")
        return 2

    if args.json:
        sys.stdout.write(dumps(result, indent=2).decode("utf-8") + "\n")
        return 0

    header = f"Score: {result.score} / 4 - {score_label(result.score)}"
    body = (
        f"Guesses: {result.guesses:.3g}\n"
        f"Guesses (log10): {result.guesses_log10:.2f}\n"
        f"Calculated in {result.calc_time * 1000:.1f} ms"
    )
    print(Panel(body, title=header))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Pattern")
    table.add_column("Token")
    table.add_column("Detail")
    table.add_column("Guesses", justify="right")
    for m in result.sequence:
        table.add_row(m.pattern, escape(m.token), escape(_describe(m)), f"{m.guesses:.3g}")
    if result.sequence:
        print(table)

    times = Table(show_header=True, header_style="bold cyan")
    times.add_column("Attack scenario")
    times.add_column("Time to crack")
    for name, ct in result.crack_times.items():
        times.add_row(name, ct.display)
    print(times)

    if result.feedback.warning:
        print(f"[bold yellow]Warning:[/bold yellow] {result.feedback.warning}")
    if result.feedback.suggestions:
        print("[bold]Suggestions:[/bold]")
        for s in result.feedback.suggestions:
            print(f" • {s}")
    return 0


def _describe(m):
    if m.pattern == "dictionary":
        detail = f"{m.dictionary_name} rank {m.rank}"
        if m.reversed:
            detail += ", reversed"
        if m.l33t:
            detail += f", l33t {m.sub_display}"
        return detail
    if m.pattern == "spatial":
        return f"{m.graph}, {m.turns} turn(s), {m.shifted_count} shifted"
    if m.pattern == "repeat":
        return f"'{m.base_token}' x{m.repeat_count}"
    if m.pattern == "sequence":
        return f"{m.sequence_name}, {'ascending' if m.ascending else 'descending'}"
    if m.pattern == "regex":
        return m.regex_name
    if m.pattern == "date":
        return f"{m.year}-{m.month:02d}-{m.day:02d}"
    return ""


def cmd_config_show(args):
    cfg = load_config(args.config)
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key")
    table.add_column("Value")
    for key in DEFAULTS:
        table.add_row(key, repr(cfg.get(key)))
    print(table)
    return 0


def cmd_config_set(args):
    cfg = load_config(args.config)
    try:
        cfg[args.key] = parse_config_value(args.key, args.value)
        options_from_config(cfg)
    except (KeyError, ValueError) as e:
        print(f"[red]Failed to set {args.key}: {e}[/red]")
        return 2
    path = save_config(cfg, args.config)
    print(f"[green]Saved {args.key} to:[/green] {path}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="passguess")
    parser.add_argument("--config", "-c", type=str, help="Path to config file")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sc = sub.add_parser("score", help="Estimate password strength and show feedback")
    sc.add_argument("password", type=str, help="Password to evaluate (wrap in quotes)")
    sc.add_argument("--user-input", "-u", action="append", default=[],
                    help="Context string to penalise (username, email...); repeatable")
    sc.add_argument("--json", action="store_true", help="Print the result as JSON")
    sc.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sc.set_defaults(func=cmd_score)

    c = sub.add_parser("config", help="Settings")
    csub = c.add_subparsers(dest="ccmd", required=True)

    c_show = csub.add_parser("show", help="Show current settings")
    c_show.set_defaults(func=cmd_config_show)

    c_set = csub.add_parser("set", help="Change a setting")
    c_set.add_argument("key", choices=sorted(DEFAULTS), help="Setting name")
    c_set.add_argument("value", type=str, help="New value")
    c_set.set_defaults(func=cmd_config_set)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
