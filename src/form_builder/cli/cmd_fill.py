"""Fill command: fill out a form, recompute derived fields and validate."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from form_builder.cli._app import app
from form_builder.cli._common import ensure_initialized, get_store, setup_logging
from form_builder.cli._console import output_json, output_table, print_err, print_ok, print_warn
from form_builder.errors import ConfigurationError, FormNotFoundError, SchemaLoadError
from form_builder.runtime.schema_loader import load_form_file, load_values_file
from form_builder.runtime.session import FormSession
from form_builder.schemas.form import FormSchema
from form_builder.utils.date_parsing import to_datetime


def resolve_form(form_ref: str) -> FormSchema:
    """Load a form from a schema file path, or from the store by id.

    Raises:
        SchemaLoadError: If form_ref is a file that is not a valid form.
        FormNotFoundError: If no saved form has that id.
    """
    path = Path(form_ref)
    if path.suffix == ".json" or path.is_file():
        return load_form_file(path)

    for form in get_store().load_forms():
        if form.id == form_ref:
            return form
    raise FormNotFoundError(form_ref)


@app.command("fill", help="Fill out a form and report derived values and validation errors.")
def fill_cmd(
    ctx: typer.Context,
    form_ref: str = typer.Argument(..., help="Saved form id, or path to a form schema JSON file"),
    values_path: Optional[Path] = typer.Option(
        None,
        "--values",
        help="JSON file mapping field ids to values",
    ),
    now: Optional[str] = typer.Option(
        None,
        "--now",
        help="Evaluation date for today()/age(), e.g. 2024-06-01 (default: current time)",
    ),
):
    """Fill out a form; exits with status 1 when the form is invalid."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    clock = datetime.now
    if now is not None:
        fixed_now = to_datetime(now)
        if fixed_now is None:
            print_err(f"Cannot read --now date: {now}")
            raise SystemExit(1)
        clock = lambda: fixed_now  # noqa: E731

    try:
        form = resolve_form(form_ref)
        inputs = load_values_file(values_path) if values_path else {}
    except (SchemaLoadError, FormNotFoundError, ConfigurationError) as e:
        print_err(str(e))
        raise SystemExit(1)

    session = FormSession(form, clock=clock)
    for field_id, value in inputs.items():
        field = form.get_field(field_id)
        if field is None:
            print_warn(f"Ignoring value for unknown field '{field_id}'")
            continue
        if field.is_derived:
            print_warn(f"Ignoring value for derived field '{field_id}'")
            continue
        session.set_value(field_id, value)

    submission = session.submit()

    if ctx.obj["json"]:
        output_json(
            {
                "formId": form.id,
                "isValid": submission is not None,
                "values": session.values,
                "errors": [error.to_json_dict() for error in session.errors],
            }
        )
    else:
        rows = []
        for field in form.sorted_fields():
            value = session.values.get(field.id)
            if field.is_derived and value in (None, ""):
                value = "(not computable)"
            rows.append(
                {
                    "field": field.label,
                    "type": field.type,
                    "value": value,
                    "error": session.visible_error(field.id) or "",
                }
            )
        output_table(rows, ctx=ctx, title=form.name)

    if submission is None:
        print_err(f"{len(session.errors)} validation error(s)")
        raise SystemExit(1)

    print_ok("Form is valid")
