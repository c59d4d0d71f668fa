"""
CLI de nginxconf (engine mínimo plan/apply)

Solo compone comandos; la lógica vive en core, transport y providers.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from nginxconf import __version__
from nginxconf.config import load_desired_spec, load_env_file, load_provider_config
from nginxconf.core.errors import NginxConfError, ResourceAbsentSignal
from nginxconf.core.models import DesiredSpec, ProviderConfig, ResourceState
from nginxconf.core.planner import Action, plan, plan_from_diffs
from nginxconf.core.runtime.resolver import state_root
from nginxconf.core.runtime.state import StateDiff, detect_drift
from nginxconf.providers.nginx.renderer import render_server_block
from nginxconf.providers.nginx.resource import NginxConfResource
from nginxconf.store import StateStore
from nginxconf.transport.ssh import RemoteSession, connect_from_config


app = typer.Typer(
    name="nginxconf",
    help="nginxconf - Archivo de configuración NGINX remoto como recurso declarativo (SSH)",
    add_completion=False,
    no_args_is_help=True,
)

state_app = typer.Typer(help="Estado local de los recursos", no_args_is_help=True)
app.add_typer(state_app, name="state")

console = Console()


def _fail(message: str) -> None:
    console.print(f"[red]✘ {escape(message)}[/red]")
    raise typer.Exit(1)


def _load_config(config_file: Optional[Path]) -> ProviderConfig:
    load_env_file()
    return load_provider_config(config_file)


@contextmanager
def _session(config: ProviderConfig) -> Iterator[RemoteSession]:
    session = connect_from_config(config, console=console)
    try:
        yield session
    finally:
        session.close()


def _refresh(
    controller: NginxConfResource,
    session: RemoteSession,
    store: StateStore,
    state: ResourceState
) -> Optional[ResourceState]:
    """Read + persistencia; si el archivo ya no existe se descarta el estado."""
    try:
        refreshed = controller.read(session, state)
    except ResourceAbsentSignal:
        store.remove(state.id)
        console.print(f"[yellow]⚠️  {state.id} no existe en el host; se elimina del estado[/yellow]")
        return None
    store.put(refreshed)
    return refreshed


def _show_diffs(diffs: List[StateDiff]) -> None:
    if not diffs:
        console.print("[green]✅ No se detectó drift. Estado deseado y real coinciden.[/green]")
        return

    table = Table(title="Drift detectado", show_header=True, header_style="bold")
    table.add_column("Recurso", style="cyan")
    table.add_column("Campo", style="cyan")
    table.add_column("Deseado", style="green")
    table.add_column("Real", style="yellow")
    table.add_column("Severidad", style="red")
    for diff in diffs:
        severity_style = {
            "error": "[red]ERROR[/red]",
            "warning": "[yellow]WARNING[/yellow]",
            "info": "[blue]INFO[/blue]"
        }.get(diff.severity, diff.severity)
        table.add_row(
            diff.resource_id,
            diff.field,
            escape(_summary(diff.desired)),
            escape(_summary(diff.actual)),
            severity_style,
        )
    console.print(table)


def _summary(value, limit: int = 40) -> str:
    text = str(value)
    first = text.splitlines()[0] if text else ""
    if len(first) > limit or "\n" in text:
        return f"{first[:limit]}… ({len(text)} bytes)"
    return first


@app.command()
def version():
    """Muestra la versión de nginxconf"""
    console.print(Panel.fit(
        "[bold cyan]nginxconf[/bold cyan]\n"
        "[dim]Recurso declarativo nginx_conf vía SSH[/dim]\n\n"
        f"[bold]Versión:[/bold] {__version__}\n"
        f"[bold]Estado:[/bold] {state_root()}",
        border_style="cyan"
    ))


@app.command()
def render(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="YAML del recurso"),
    server_name: Optional[str] = typer.Option(None, "--server-name", help="server_name"),
    listen_port: Optional[int] = typer.Option(None, "--listen-port", help="Puerto de escucha"),
    root: Optional[str] = typer.Option(None, "--root", help="Directorio raíz"),
):
    """Imprime la configuración canónica que generaría Create"""
    try:
        if file:
            spec = load_desired_spec(file)
            server_name, listen_port, root = spec.server_name, spec.listen_port, spec.root
    except NginxConfError as e:
        _fail(str(e))

    if server_name is None or listen_port is None or root is None:
        _fail("Indica --file o bien --server-name, --listen-port y --root")

    # Salida cruda (sin markup) para poder redirigirla a un archivo
    typer.echo(render_server_block(server_name, listen_port, root))


@app.command("plan")
def plan_cmd(
    file: Path = typer.Option(..., "--file", "-f", help="YAML del recurso"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML del provider (host, user, password)"),
    state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Directorio del estado (por defecto /var/lib/nginxconf)"),
    refresh: bool = typer.Option(True, "--refresh/--no-refresh", help="Leer el .conf real antes de planificar"),
):
    """Muestra qué haría apply (sin ejecutar cambios)"""
    try:
        spec = load_desired_spec(file)
        store = StateStore(state_dir)
        state = store.get(spec.path)

        if state is not None and refresh:
            config = _load_config(config_file)
            controller = NginxConfResource.from_config(config, console=console)
            with _session(config) as session:
                state = _refresh(controller, session, store, state)
    except NginxConfError as e:
        _fail(str(e))

    action = plan(spec, state)
    diffs = detect_drift(spec, state)
    console.print(Panel.fit(f"[bold cyan]Plan: {spec.path}[/bold cyan]", border_style="cyan"))
    _show_diffs(diffs)
    for line in plan_from_diffs(diffs):
        console.print(f"  [cyan]•[/cyan] {escape(line)}")
    console.print(f"\n[bold]Acción:[/bold] {action.value}")


def _apply(
    controller: NginxConfResource,
    session: RemoteSession,
    store: StateStore,
    spec: DesiredSpec,
    state: Optional[ResourceState]
) -> Action:
    action = plan(spec, state)
    if action == Action.CREATE:
        store.put(controller.create(session, spec))
    elif action == Action.UPDATE:
        store.put(controller.update(session, spec))
    return action


@app.command()
def apply(
    file: Path = typer.Option(..., "--file", "-f", help="YAML del recurso"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML del provider (host, user, password)"),
    state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Directorio del estado (por defecto /var/lib/nginxconf)"),
):
    """Reconcilia el .conf remoto con el recurso declarado"""
    try:
        spec = load_desired_spec(file)
        config = _load_config(config_file)
        store = StateStore(state_dir)
        controller = NginxConfResource.from_config(config, console=console)

        with _session(config) as session:
            state = store.get(spec.path)
            if state is not None:
                state = _refresh(controller, session, store, state)
            action = _apply(controller, session, store, spec, state)
    except NginxConfError as e:
        _fail(str(e))

    if action == Action.NOOP:
        console.print("[green]✅ Sin cambios[/green]")
    else:
        console.print(f"[green]✔ Apply completado ({action.value}): {spec.path}[/green]")


@app.command("refresh")
def refresh_cmd(
    resource_id: str = typer.Argument(..., help="Path remoto del .conf"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML del provider (host, user, password)"),
    state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Directorio del estado (por defecto /var/lib/nginxconf)"),
    show: bool = typer.Option(False, "--show", help="Mostrar el contenido leído"),
):
    """Lee el .conf real y actualiza el estado"""
    try:
        store = StateStore(state_dir)
        state = store.get(resource_id)
        if state is None:
            _fail(f"{resource_id} no está en el estado (usa 'import')")
        config = _load_config(config_file)
        controller = NginxConfResource.from_config(config, console=console)
        with _session(config) as session:
            state = _refresh(controller, session, store, state)
    except NginxConfError as e:
        _fail(str(e))

    if state is not None:
        console.print(f"[green]✔ Estado actualizado: {state.id} ({len(state.content)} bytes)[/green]")
        if show:
            console.print(Syntax(state.content, "nginx", theme="ansi_dark", line_numbers=True))


@app.command()
def destroy(
    resource_id: str = typer.Argument(..., help="Path remoto del .conf"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML del provider (host, user, password)"),
    state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Directorio del estado (por defecto /var/lib/nginxconf)"),
):
    """Elimina el .conf remoto y lo quita del estado"""
    try:
        store = StateStore(state_dir)
        state = store.get(resource_id) or ResourceState(id=resource_id, path=resource_id)
        config = _load_config(config_file)
        controller = NginxConfResource.from_config(config, console=console)
        with _session(config) as session:
            controller.delete(session, state)
        store.remove(resource_id)
    except NginxConfError as e:
        _fail(str(e))


@app.command("import")
def import_cmd(
    resource_id: str = typer.Argument(..., help="Path remoto absoluto del .conf existente"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML del provider (host, user, password)"),
    state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Directorio del estado (por defecto /var/lib/nginxconf)"),
):
    """Adopta un .conf existente en el estado (import + read)"""
    try:
        store = StateStore(state_dir)
        config = _load_config(config_file)
        controller = NginxConfResource.from_config(config, console=console)
        state = controller.import_state(resource_id)
        with _session(config) as session:
            state = controller.read(session, state)
        store.put(state)
    except NginxConfError as e:
        _fail(str(e))

    console.print(f"[green]✔ Importado: {state.id} ({len(state.content)} bytes)[/green]")


@state_app.command("list")
def state_list(state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Directorio del estado (por defecto /var/lib/nginxconf)")):
    """Lista los recursos registrados en el estado"""
    try:
        resources = StateStore(state_dir).all()
    except NginxConfError as e:
        _fail(str(e))

    if not resources:
        console.print("[dim]No hay recursos en el estado[/dim]")
        return

    table = Table(title="Recursos nginx_conf", show_header=True, header_style="bold cyan")
    table.add_column("ID / Path", style="cyan")
    table.add_column("server_name", style="green")
    table.add_column("Puerto", style="yellow")
    table.add_column("Bytes", justify="right")
    for state in resources:
        table.add_row(
            state.id,
            state.server_name or "-",
            str(state.listen_port) if state.listen_port else "-",
            str(len(state.content)),
        )
    console.print(table)


def main():
    app()
