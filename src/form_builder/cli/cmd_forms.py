"""Forms commands: list, import and delete saved forms."""

from pathlib import Path

import typer

from form_builder.cli._app import app
from form_builder.cli._common import ensure_initialized, get_store, setup_logging
from form_builder.cli._console import console, output_table, print_err, print_ok
from form_builder.errors import ConfigurationError, SchemaLoadError
from form_builder.runtime.schema_loader import load_form_file

forms_app = typer.Typer(
    no_args_is_help=True,
    help="Manage saved forms (list, import, delete).",
)
app.add_typer(forms_app, name="forms")


def _open_store():
    try:
        return get_store()
    except ConfigurationError as e:
        print_err(str(e))
        raise SystemExit(1)


@forms_app.command("list", help="List all saved forms.")
def forms_list(ctx: typer.Context):
    """List all saved forms."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    forms = _open_store().load_forms()
    rows = [
        {
            "id": form.id,
            "name": form.name,
            "fields": len(form.fields),
            "updatedAt": form.updated_at,
        }
        for form in forms
    ]
    output_table(rows, ctx=ctx, title=f"Saved forms ({len(rows)})")


@forms_app.command("import", help="Validate a form schema file and save it.")
def forms_import(
    ctx: typer.Context,
    schema_path: Path = typer.Argument(..., help="Path to a form schema JSON file"),
):
    """Validate a form schema file and add it to the store."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    try:
        form = load_form_file(schema_path)
    except SchemaLoadError as e:
        print_err(str(e))
        raise SystemExit(1)

    store = _open_store()
    store.save_form(form)
    print_ok(f"Saved form {form.id} ({form.name}) with {len(form.fields)} field(s)")


@forms_app.command("delete", help="Delete a saved form.")
def forms_delete(
    ctx: typer.Context,
    form_id: str = typer.Argument(..., help="Id of the form to delete"),
):
    """Delete a saved form by id."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    store = _open_store()
    if not any(form.id == form_id for form in store.load_forms()):
        print_err(f"Form not found: {form_id}")
        raise SystemExit(1)

    store.delete_form(form_id)
    console.print(f"Deleted form {form_id}")
