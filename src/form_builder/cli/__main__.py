from form_builder.cli import app

app()
