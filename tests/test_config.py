"""Tests for the project configuration store."""

import json

import pytest

from loaderkit.config import ConfigStore
from loaderkit.errors import ConfigurationError
from loaderkit.models import EndpointMode


@pytest.mark.asyncio
async def test_missing_file_loads_defaults(temp_dir):
    store = ConfigStore(temp_dir / "loaderkit.json")

    config = await store.load()

    assert config.packages == "packages"
    assert config.base_dir == temp_dir.resolve()
    assert not store.exists


@pytest.mark.asyncio
async def test_save_and_load(temp_dir):
    store = ConfigStore(temp_dir / "app" / "loaderkit.json")
    config = await store.load()
    config.packages = "lib/vendor"
    config.dev_dependencies["babel"] = "npm:babel@^4.7.12"
    config.loader.transpiler = "babel"
    config.loader.endpoints["github"].mode = EndpointMode.LOCAL

    await store.save(config)
    data = json.loads(store.config_file.read_text())
    reloaded = await store.load()

    assert data["devDependencies"] == {"babel": "npm:babel@^4.7.12"}
    assert "base_dir" not in data
    assert not store.config_file.with_suffix(".tmp").exists()
    assert reloaded.packages == "lib/vendor"
    assert reloaded.install_dir == (temp_dir / "app" / "lib" / "vendor").resolve()
    assert reloaded.loader.transpiler == "babel"
    assert reloaded.loader.endpoints["github"].mode == EndpointMode.LOCAL


@pytest.mark.asyncio
async def test_unknown_babel_options_survive(temp_dir):
    path = temp_dir / "loaderkit.json"
    path.write_text(json.dumps({"loader": {"babelOptions": {"stage": 0}}}))
    store = ConfigStore(path)

    await store.save(await store.load())

    assert json.loads(path.read_text())["loader"]["babelOptions"] == {"stage": 0}


@pytest.mark.asyncio
async def test_invalid_json(temp_dir):
    path = temp_dir / "loaderkit.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError):
        await ConfigStore(path).load()


@pytest.mark.asyncio
async def test_invalid_schema(temp_dir):
    path = temp_dir / "loaderkit.json"
    path.write_text(json.dumps({"dependencies": ["babel"]}))

    with pytest.raises(ConfigurationError):
        await ConfigStore(path).load()
