from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path

import ubelt as ub

from .util import expand

DEFAULT_BASE_IMAGE = r'C:\VMTemplates\WindowsServer-sysprep.vhdx'
VM_GENERATION = 2
CONFIG_FILENAME = '.hvprovision.toml'


@dataclass
class ImageConfig:
    base_vhdx: str = DEFAULT_BASE_IMAGE


@dataclass
class VMConfig:
    memory_startup_mb: int = 1024

    @property
    def memory_startup_bytes(self) -> int:
        return int(self.memory_startup_mb) * 1024 * 1024


@dataclass
class HyperVConfig:
    powershell: str = 'powershell'
    console_client: str = 'vmconnect.exe'


@dataclass
class DefaultsConfig:
    host: str = 'localhost'
    switch: str = ''
    destination: str = ''


@dataclass
class HVProvisionConfig:
    image: ImageConfig = field(default_factory=ImageConfig)
    vm: VMConfig = field(default_factory=VMConfig)
    hyperv: HyperVConfig = field(default_factory=HyperVConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    verbosity: int = 1

    def expanded_paths(self) -> 'HVProvisionConfig':
        self.image.base_vhdx = expand(self.image.base_vhdx)
        self.defaults.destination = (
            expand(self.defaults.destination) if self.defaults.destination else ''
        )
        return self


def user_config_path() -> Path:
    return Path(ub.Path.appdir('hvprovision', type='config')) / 'config.toml'


def _toml_escape(s: str) -> str:
    return s.replace('\\', '\\\\').replace('"', '\\"')


def dump_toml(cfg: HVProvisionConfig) -> str:
    d = asdict(cfg)
    lines: list[str] = []
    # Bare keys after a [table] header belong to that table.
    if d['verbosity'] != 1:
        lines.append(f'verbosity = {int(d["verbosity"])}')
        lines.append('')
    for section, body in d.items():
        if not isinstance(body, dict):
            continue
        lines.append(f'[{section}]')
        for k, v in body.items():
            if isinstance(v, bool):
                lines.append(f'{k} = {"true" if v else "false"}')
            elif isinstance(v, int):
                lines.append(f'{k} = {v}')
            else:
                lines.append(f'{k} = "{_toml_escape(str(v))}"')
        lines.append('')
    return '\n'.join(lines).rstrip() + '\n'


def load(path: Path) -> HVProvisionConfig:
    raw = tomllib.loads(path.read_text(encoding='utf-8'))
    cfg = HVProvisionConfig()
    for section in ('image', 'vm', 'hyperv', 'defaults'):
        if section in raw and isinstance(raw[section], dict):
            obj = getattr(cfg, section)
            for k, v in raw[section].items():
                if hasattr(obj, k):
                    setattr(obj, k, v)
    if 'verbosity' in raw:
        cfg.verbosity = int(raw['verbosity'])
    return cfg


def save(path: Path, cfg: HVProvisionConfig) -> None:
    path.write_text(dump_toml(cfg), encoding='utf-8')


def find_config(explicit: str | None = None) -> Path | None:
    """Return the config file to use, or None when only defaults apply.

    An explicit path is returned even if missing so the caller can report it.
    Otherwise the working directory file wins over the per-user file.
    """
    if explicit:
        return Path(explicit).expanduser().resolve()
    local = Path(CONFIG_FILENAME).resolve()
    if local.exists():
        return local
    user = user_config_path()
    if user.exists():
        return user
    return None
