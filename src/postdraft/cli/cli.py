"""CLI entrypoint: Typer app definition and command registration"""

import typer

from postdraft.cli.commands import (
    draft_cmd,
    import_cmd,
    init_cmd,
    publish_cmd,
    show_cmd,
    unpublish_cmd,
)


app = typer.Typer(name="postdraft", no_args_is_help=True, help="Blog post draft import and save pipeline")

app.command(name="init")(init_cmd)
app.command(name="import")(import_cmd)
app.command(name="draft")(draft_cmd)
app.command(name="publish")(publish_cmd)
app.command(name="unpublish")(unpublish_cmd)
app.command(name="show")(show_cmd)
