import click

from base_classes import PromptError
from config_manager import ConfigManager
from console_input import ConsoleInput

TYPES = {
    'str': str,
    'int': int,
    'float': float,
    'bool': bool,
}


@click.group()
@click.option('-c', '--conf', default=None, help='Path to a custom configuration file')
@click.option('--max-attempts', type=int, default=None, help='Give up after this many invalid answers (0 = never)')
@click.option('--no-editor', is_flag=True, default=False, help='Disable the external editor escape in multiline input')
@click.pass_context
def cli(ctx, conf, max_attempts, no_editor):
    """
    the main entry point for the CLI click interface
    """
    ctx.ensure_object(dict)
    overrides = {}
    if max_attempts is not None:
        overrides['max_attempts'] = max_attempts
    config = ConfigManager(conf).create_session_config(overrides)
    ctx.obj['CONSOLE'] = ConsoleInput(config)
    ctx.obj['NO_EDITOR'] = no_editor


def _console(ctx) -> ConsoleInput:
    return ctx.obj['CONSOLE']


def _editor_setting(ctx, prompt):
    """--no-editor switches the escape off; otherwise [EDITOR] active decides."""
    if ctx.obj['NO_EDITOR']:
        return prompt.editor(False)
    return prompt


def _run(fn):
    """Run a prompt, turning prompt failures into a clean exit status."""
    try:
        return fn()
    except PromptError as e:
        raise click.ClickException(e.user_message) from e


@cli.command()
@click.pass_context
def demo(ctx):
    """
    Walk through every prompt kind
    """
    console = _console(ctx)

    name = _run(console.input().message("Enter your name: ").get_input)
    click.echo(f"Hello, {name}!")

    age = _run(console.input().message("Enter your age [19]: ").default("19").get_int)
    click.echo(f"You are {age} years old.")

    bio_prompt = _editor_setting(ctx, console.input().message("Enter your bio").multiline())
    bio = _run(bio_prompt.get_input)
    click.echo(f"Your bio:\n{bio}")

    color = _run(console.selection()
                 .message("Choose your favorite color")
                 .options(["Red", "Green", "Blue"])
                 .get_selection)
    click.echo(f"Your favorite color is {color}")

    password = _run(console.password().message("Enter your password: ").get_password)
    click.echo(f"Your password is {len(password)} characters long")


@cli.command()
@click.argument('message')
@click.option('-d', '--default', 'default', default=None, help='Value used when the answer is empty')
@click.option('-m', '--multiline', is_flag=True, default=False, help='Read until end of input')
@click.option('-t', '--type', 'type_name', type=click.Choice(sorted(TYPES)), default='str', help='Type the answer must parse as')
@click.option('--no-tips', is_flag=True, default=False, help='Hide the multiline tip line')
@click.pass_context
def ask(ctx, message, default, multiline, type_name, no_tips):
    """
    Ask for a single value and print it
    """
    prompt = _editor_setting(ctx, _console(ctx).input().message(message))
    if default is not None:
        prompt = prompt.default(default)
    if multiline:
        prompt = prompt.multiline()
    if no_tips:
        prompt = prompt.disable_tips()
    value = _run(lambda: prompt.get_parsed_input(TYPES[type_name]))
    click.echo(value)


@cli.command()
@click.argument('message')
@click.argument('options', nargs=-1, required=True)
@click.pass_context
def select(ctx, message, options):
    """
    Choose one of OPTIONS and print it
    """
    prompt = _console(ctx).selection().message(message).options(options)
    click.echo(_run(prompt.get_selection))


@cli.command()
@click.argument('message')
@click.pass_context
def secret(ctx, message):
    """
    Read a masked value and print its length
    """
    value = _run(_console(ctx).password().message(message).get_password)
    click.echo(len(value))


if __name__ == '__main__':
    cli()
