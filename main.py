import argparse
import sys
from importlib.metadata import PackageNotFoundError, version

import pandas as pd

import config_paths
from app_logging import init_logging
from errors import TabulaError
from field_coercion import display_text
from persistence_gateway import JsonFileStore, PersistenceGateway
from table_editor import TableEditor

try:
    __version__ = version("tabula")
except PackageNotFoundError:
    __version__ = "0.0.0"


def _parse_assignments(pairs):
    fields = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Expected field=value, got '{pair}'")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Missing field name in '{pair}'")
        fields[key] = value
    return fields


def render_page(editor: TableEditor) -> str:
    view = editor.project()
    edits = editor.state.edits
    headers = ["id"] + [
        f"{c.label} {view.sort_indicator(c.key)}".rstrip() for c in view.columns
    ]
    cells = []
    for record in view.rows:
        line = [record.id]
        for col in view.columns:
            if edits.is_open(record.id):
                line.append(display_text(edits.pending_value(record.id, col.key)) + "*")
            else:
                line.append(display_text(record.get(col.key)))
        cells.append(line)
    frame = pd.DataFrame(cells, columns=headers, dtype=object)
    table = frame.to_string(index=False) if cells else "(no rows)"
    footer = f"Page {view.page + 1}/{view.page_count} ({view.total} rows, {editor.state.theme} mode)"
    return f"{table}\n{footer}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabula", description="tabula - tabular data editor"
    )
    parser.add_argument("-v", "--version", action="store_true", help="print version")
    parser.add_argument("--state", help="path of the state file")
    sub = parser.add_subparsers(dest="command")

    show = sub.add_parser("show", help="print one page of rows")
    show.add_argument("--query", default="")
    show.add_argument("--sort")
    show.add_argument("--desc", action="store_true")
    show.add_argument("--page", type=int, default=1)

    add = sub.add_parser("add", help="add a row")
    add.add_argument("fields", nargs="*", metavar="field=value")

    delete = sub.add_parser("delete", help="delete a row")
    delete.add_argument("id")

    edit = sub.add_parser("set", help="edit fields of a row and commit all edits")
    edit.add_argument("id")
    edit.add_argument("fields", nargs="+", metavar="field=value")

    sub.add_parser("discard", help="drop all pending edits")

    imp = sub.add_parser("import", help="replace all rows with a CSV file")
    imp.add_argument("path")

    exp = sub.add_parser("export", help="export visible columns as CSV")
    exp.add_argument("path", nargs="?")

    sub.add_parser("columns", help="list columns")

    col_add = sub.add_parser("column-add", help="append a column")
    col_add.add_argument("label", nargs="?")

    col_label = sub.add_parser("column-label", help="relabel a column")
    col_label.add_argument("key")
    col_label.add_argument("label")

    col_hide = sub.add_parser("column-hide", help="hide a column")
    col_hide.add_argument("key")

    col_show = sub.add_parser("column-show", help="show a hidden column")
    col_show.add_argument("key")

    col_move = sub.add_parser("column-move", help="move a column to a new position")
    col_move.add_argument("from_index", type=int)
    col_move.add_argument("to_index", type=int)

    theme = sub.add_parser("theme", help="set or toggle light/dark mode")
    theme.add_argument("mode", nargs="?", choices=["light", "dark"])
    return parser


def run_command(editor: TableEditor, args) -> str:
    cmd = args.command
    if cmd in (None, "show"):
        if cmd == "show":
            editor.view.set_query(args.query)
            if args.sort:
                editor.view.set_sort(args.sort, "desc" if args.desc else "asc")
            editor.view.go_to_page(max(0, args.page - 1))
        return render_page(editor)

    if cmd == "add":
        record = editor.add_row(_parse_assignments(args.fields))
        return f"Added row {record.id}"

    if cmd == "delete":
        if not editor.delete_row(args.id):
            raise KeyError(f"No row '{args.id}'")
        return f"Deleted row {args.id}"

    if cmd == "set":
        fields = _parse_assignments(args.fields)
        editor.begin_edit(args.id)
        for key, value in fields.items():
            editor.set_field(args.id, key, value)
        committed = editor.commit_all()
        return f"Saved {len(committed)} row{'s' if len(committed) != 1 else ''}"

    if cmd == "discard":
        editor.discard_all()
        return "Pending edits discarded"

    if cmd == "import":
        report = editor.import_csv(args.path)
        lines = [f"Imported {report.count} rows"]
        lines.extend(f"warning: {err}" for err in report.errors)
        return "\n".join(lines)

    if cmd == "export":
        text = editor.export_csv(args.path)
        return f"Exported to {args.path}" if args.path else text

    if cmd == "columns":
        lines = []
        for idx, col in enumerate(editor.state.columns.list()):
            flag = "" if col.visible else " (hidden)"
            lines.append(f"{idx}: {col.key} [{col.label}]{flag}")
        return "\n".join(lines)

    if cmd == "column-add":
        col = editor.add_column(args.label)
        return f"Added column {col.key}"

    if cmd == "column-label":
        editor.set_column_label(args.key, args.label)
        return f"Relabeled column {args.key}"

    if cmd in ("column-hide", "column-show"):
        editor.set_column_visible(args.key, cmd == "column-show")
        return f"Column {args.key} {'shown' if cmd == 'column-show' else 'hidden'}"

    if cmd == "column-move":
        if not editor.move_column(args.from_index, args.to_index):
            return "Column order unchanged"
        return f"Moved column {args.from_index} to {args.to_index}"

    if cmd == "theme":
        if args.mode:
            editor.set_theme(args.mode)
        else:
            editor.toggle_theme()
        return f"Theme: {editor.state.theme}"

    raise ValueError(f"Unknown command '{cmd}'")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    cfg = config_paths.load_config()
    init_logging(cfg["LOG_LEVEL"], cfg["JSON_LOGS"])
    state_path = args.state or cfg["STATE_PATH"]
    if not args.state:
        config_paths.ensure_config_dirs()

    editor = TableEditor(PersistenceGateway(JsonFileStore(state_path)), cfg["PAGE_SIZE"])
    editor.open()
    try:
        output = run_command(editor, args)
    except (TabulaError, KeyError, ValueError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        print(f"Error: {message}", file=sys.stderr)
        return 1
    finally:
        editor.close()
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
