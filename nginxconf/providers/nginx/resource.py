"""
Controller del recurso nginx_conf: Create/Read/Update/Delete/Import

La sesión remota se recibe en cada operación; el controller no guarda conexión.

Asimetría Create/Update: Create siempre renderiza desde server_name,
listen_port y root; Update escribe solo `content`. Cambiar server_name después
de crear no tiene efecto en Update.
"""

from typing import Optional

from rich.console import Console

from nginxconf.core.errors import (
    ProviderError,
    ResourceAbsentSignal,
    ResourceOperationError,
    StateInconsistencyError,
)
from nginxconf.core.models import DEFAULT_STAGING_PATH, DesiredSpec, ProviderConfig, ResourceState
from nginxconf.providers.nginx.renderer import render_server_block
from nginxconf.transport.contracts import CommandChannel
from nginxconf.transport.files import Found, NotFound, RemoteFiles


class NginxConfResource:
    """Máquina de reconciliación de un único archivo .conf remoto"""

    type_name = "nginx_conf"

    def __init__(
        self,
        staging_path: str = DEFAULT_STAGING_PATH,
        use_sudo: bool = True,
        verify: bool = False,
        timeout: Optional[float] = None,
        console: Optional[Console] = None
    ):
        self.staging_path = staging_path
        self.use_sudo = use_sudo
        self.verify = verify
        self.timeout = timeout
        self.console = console

    @classmethod
    def from_config(cls, config: ProviderConfig, console: Optional[Console] = None) -> "NginxConfResource":
        return cls(
            staging_path=config.staging_path,
            use_sudo=config.use_sudo,
            verify=config.verify,
            timeout=config.command_timeout,
            console=console,
        )

    def _files(self, session: CommandChannel) -> RemoteFiles:
        return RemoteFiles(session, timeout=self.timeout)

    def create(self, session: CommandChannel, spec: DesiredSpec) -> ResourceState:
        """
        Crea el .conf: staging + mv privilegiado

        Args:
            session: Canal remoto compartido
            spec: Estado deseado (content se ignora en la creación)

        Returns:
            ResourceState con id == spec.path

        Raises:
            ResourceOperationError: si falla el staging o el mv; no hay estado
                (el archivo de staging puede quedar huérfano)
            StateInconsistencyError: con verify, si el .conf no se puede releer
        """
        files = self._files(session)
        content = render_server_block(spec.server_name, spec.listen_port, spec.root)

        try:
            files.write_file(self.staging_path, content)
        except ProviderError as e:
            self._fail("subir configuración a", self.staging_path)
            raise ResourceOperationError("create", self.staging_path, e) from e

        try:
            files.move_file(self.staging_path, spec.path, privileged=self.use_sudo)
        except ProviderError as e:
            self._fail("mover configuración a", spec.path)
            raise ResourceOperationError("create", spec.path, e) from e

        state = ResourceState(
            id=spec.path,
            path=spec.path,
            content=content,
            server_name=spec.server_name,
            listen_port=spec.listen_port,
            root=spec.root,
        )

        if self.verify:
            self._verify_created(files, state)

        if self.console:
            self.console.print(f"[green]✔ Configuración creada: {spec.path}[/green]")
        return state

    def _verify_created(self, files: RemoteFiles, state: ResourceState) -> None:
        result = files.read_file(state.path)
        if isinstance(result, NotFound):
            raise StateInconsistencyError(state.path, "el archivo recién creado no existe")
        if not isinstance(result, Found):
            raise StateInconsistencyError(state.path, f"el archivo recién creado no se puede leer ({result.cause})")
        if result.content != state.content:
            raise StateInconsistencyError(state.path, "el contenido leído no coincide con el escrito")

    def read(self, session: CommandChannel, state: ResourceState) -> ResourceState:
        """
        Refresca content con los bytes reales del host

        Raises:
            ResourceAbsentSignal: el archivo no existe (el engine debe descartar el estado)
            ResourceOperationError: cualquier otro fallo de lectura
        """
        result = self._files(session).read_file(state.id)
        if isinstance(result, NotFound):
            raise ResourceAbsentSignal(state.id)
        if not isinstance(result, Found):
            self._fail("leer configuración en", state.id)
            raise ResourceOperationError("read", state.id, result.cause) from result.cause
        return state.model_copy(update={"content": result.content})

    def update(self, session: CommandChannel, spec: DesiredSpec) -> ResourceState:
        """
        Escribe spec.content tal cual sobre spec.path (sin staging)

        Los campos estructurados no se usan para regenerar el contenido.
        """
        if spec.content is None:
            raise ResourceOperationError("update", spec.path, ValueError("content es requerido para actualizar"))

        try:
            self._files(session).write_file(spec.path, spec.content)
        except ProviderError as e:
            self._fail("actualizar configuración en", spec.path)
            raise ResourceOperationError("update", spec.path, e) from e

        if self.console:
            self.console.print(f"[green]✔ Configuración actualizada: {spec.path}[/green]")
        return ResourceState(
            id=spec.path,
            path=spec.path,
            content=spec.content,
            server_name=spec.server_name,
            listen_port=spec.listen_port,
            root=spec.root,
        )

    def delete(self, session: CommandChannel, state: ResourceState) -> None:
        """
        Borra el .conf remoto (rm -f)

        Devuelve None (estado eliminado). Si falla, lanza y el llamador conserva
        el estado para reintentar.
        """
        try:
            self._files(session).remove_file(state.id)
        except ProviderError as e:
            self._fail("eliminar configuración en", state.id)
            raise ResourceOperationError("delete", state.id, e) from e

        if self.console:
            self.console.print(f"[green]✔ Configuración eliminada: {state.id}[/green]")
        return None

    def import_state(self, resource_id: str) -> ResourceState:
        """El id de import es el path remoto literal; content queda vacío hasta el próximo Read."""
        return ResourceState(id=resource_id, path=resource_id, content="")

    def _fail(self, action: str, path: str) -> None:
        if self.console:
            self.console.print(f"[red]✘ Error al {action} {path}[/red]")
