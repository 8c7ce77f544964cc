"""Tests for config load/save and lookup."""

from __future__ import annotations

from pathlib import Path

from hvprovision.config import (
    DEFAULT_BASE_IMAGE,
    HVProvisionConfig,
    dump_toml,
    find_config,
    load,
    save,
)


def test_dump_load_roundtrip(tmp_path: Path) -> None:
    cfg = HVProvisionConfig()
    cfg.image.base_vhdx = r'D:\Templates\"gold".vhdx'
    cfg.defaults.switch = 'External'
    cfg.vm.memory_startup_mb = 2048
    cfg.verbosity = 2
    fpath = tmp_path / '.hvprovision.toml'
    save(fpath, cfg)

    cfg2 = load(fpath)
    assert cfg2.image.base_vhdx == cfg.image.base_vhdx
    assert cfg2.defaults.switch == 'External'
    assert cfg2.vm.memory_startup_bytes == 2048 * 1024 * 1024
    assert cfg2.verbosity == 2
    text = fpath.read_text()
    assert text.index('verbosity = 2') < text.index('[image]')


def test_defaults() -> None:
    cfg = HVProvisionConfig()
    assert cfg.image.base_vhdx == DEFAULT_BASE_IMAGE
    assert cfg.vm.memory_startup_bytes == 1024**3
    assert 'verbosity =' not in dump_toml(cfg)


def test_load_ignores_unknown_keys(tmp_path: Path) -> None:
    fpath = tmp_path / 'c.toml'
    fpath.write_text('[vm]\nmemory_startup_mb = 512\nbogus = 1\n[extra]\nx = 1\n')
    cfg = load(fpath)
    assert cfg.vm.memory_startup_mb == 512
    assert not hasattr(cfg.vm, 'bogus')


def test_expanded_paths_expands_env(monkeypatch) -> None:
    monkeypatch.setenv('HVP_TEST_DIR', '/srv/hv')
    cfg = HVProvisionConfig()
    cfg.image.base_vhdx = '$HVP_TEST_DIR/base.vhdx'
    cfg.defaults.destination = '$HVP_TEST_DIR/vms'
    out = cfg.expanded_paths()
    assert out.image.base_vhdx == '/srv/hv/base.vhdx'
    assert out.defaults.destination == '/srv/hv/vms'


def test_find_config_precedence(monkeypatch, tmp_path: Path) -> None:
    user = tmp_path / 'user' / 'config.toml'
    monkeypatch.setattr('hvprovision.config.user_config_path', lambda: user)
    monkeypatch.chdir(tmp_path)
    assert find_config() is None
    user.parent.mkdir()
    user.write_text('')
    assert find_config() == user
    local = tmp_path / '.hvprovision.toml'
    local.write_text('')
    assert find_config() == local.resolve()
    assert find_config('other.toml') == (tmp_path / 'other.toml').resolve()
