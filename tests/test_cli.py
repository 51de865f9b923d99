import json

import pytest

from tplcontroller.cli import cli

from .conftest import LED_ID, MOCK_HOST, MOCK_PWD


async def test_help(runner):
    res = await runner.invoke(cli, ["--help"])
    assert res.exit_code == 0
    assert "led" in res.output


@pytest.mark.parametrize(
    ("args", "current", "expected_state", "expected_value"),
    [
        pytest.param([], "0", "success", "1", id="default-toggle"),
        pytest.param(["toggle"], "1", "success", "0", id="toggle"),
        pytest.param(["on"], "0", "success", "1", id="on"),
        pytest.param(["OFF"], "0", "no action", "0", id="off"),
    ],
)
async def test_led(mock_device, runner, args, current, expected_state, expected_value):
    device = mock_device(states={"enable": current})

    res = await runner.invoke(
        cli,
        ["--host", MOCK_HOST, "--password", MOCK_PWD, "led", *args],
        catch_exceptions=False,
    )
    assert res.exit_code == 0
    assert f"{MOCK_HOST} {expected_state}" in res.output
    assert device.states == {"enable": expected_value}


async def test_led_invalid_state(mock_device, runner):
    device = mock_device()

    res = await runner.invoke(
        cli, ["--host", MOCK_HOST, "--password", MOCK_PWD, "led", "blink"]
    )
    assert res.exit_code == 2
    assert device.requests == []


async def test_led_multiple_hosts(mock_device, runner):
    first = mock_device("127.0.0.1", states={"enable": "0"})
    second = mock_device("127.0.0.2", states={"enable": "1"})

    res = await runner.invoke(
        cli,
        [
            "--host",
            "127.0.0.1",
            "--host",
            "127.0.0.2",
            "--password",
            MOCK_PWD,
            "led",
            "on",
        ],
        catch_exceptions=False,
    )
    assert res.exit_code == 0
    assert "127.0.0.1 success" in res.output
    assert "127.0.0.2 no action" in res.output
    assert first.states == second.states == {"enable": "1"}


async def test_led_from_environment(mock_device, runner):
    device = mock_device()

    res = await runner.invoke(
        cli,
        ["led", "on"],
        env={"TPL_HOST": MOCK_HOST, "TPL_PASSWORD": MOCK_PWD},
        catch_exceptions=False,
    )
    assert res.exit_code == 0
    assert device.states == {"enable": "1"}


async def test_led_json(mock_device, runner):
    mock_device()

    res = await runner.invoke(
        cli,
        ["--host", MOCK_HOST, "--password", MOCK_PWD, "--json", "led", "on"],
        catch_exceptions=False,
    )
    assert res.exit_code == 0
    assert json.loads(res.output) == {MOCK_HOST: {"state": "success"}}


async def test_led_device_error(mock_device, runner):
    mock_device(challenge_status=500)

    res = await runner.invoke(
        cli,
        ["--host", MOCK_HOST, "--password", MOCK_PWD, "led"],
        catch_exceptions=False,
    )
    assert res.exit_code == 0
    assert f"{MOCK_HOST} Request failed with status code 500" in res.output


async def test_set(mock_device, runner):
    device = mock_device(states={"enable": "0", "blink": "0"})

    res = await runner.invoke(
        cli,
        [
            "--host",
            MOCK_HOST,
            "--password",
            MOCK_PWD,
            "set",
            "--command",
            "led",
            "enable=on",
            "blink=1",
        ],
        catch_exceptions=False,
    )
    assert res.exit_code == 0
    assert f"{MOCK_HOST} success" in res.output
    assert device.payloads == [f"id {LED_ID}\r\nenable 1\r\nblink 1"]


async def test_set_bad_format(mock_device, runner):
    device = mock_device()

    res = await runner.invoke(
        cli, ["--host", MOCK_HOST, "--password", MOCK_PWD, "set", "enable"]
    )
    assert res.exit_code == 2
    assert "is not in KEY=VALUE format" in res.output
    assert device.requests == []


async def test_missing_password(mock_device, runner):
    device = mock_device()

    res = await runner.invoke(cli, ["--host", MOCK_HOST, "led"])
    assert res.exit_code == 2
    assert "requires --password" in res.output
    assert device.requests == []


async def test_missing_host(runner):
    res = await runner.invoke(cli, ["--password", MOCK_PWD, "led"])
    assert res.exit_code == 1
    assert "At least one --host is required" in res.output


async def test_commands(runner):
    res = await runner.invoke(cli, ["commands"], catch_exceptions=False)
    assert res.exit_code == 0
    assert "led" in res.output
    assert "enable: on, off, toggle" in res.output

    res = await runner.invoke(cli, ["--json", "commands"], catch_exceptions=False)
    assert json.loads(res.output) == {
        "led": {
            "id": LED_ID,
            "keys": {"enable": {"aliases": {"on": "1", "off": "0"}, "toggle": True}},
        }
    }
