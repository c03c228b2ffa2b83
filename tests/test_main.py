"""Tests for the command-line entry point."""

import json

import pytest

from jobtracker.config import AppConfig, ModelConfig
from jobtracker.main import build_app, main


def _run(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_build_app_seeds_empty_data_dir(tmp_path):
    config = AppConfig(model=ModelConfig(api_key=""), data_dir=str(tmp_path))
    app = build_app(config)

    assert [f.name for f in app.store.folders] == ["互联网大厂", "外企", "国企"]
    assert (tmp_path / "state.json").exists()


def test_build_app_without_seed(tmp_path):
    config = AppConfig(model=ModelConfig(api_key=""), seed_on_first_run=False)
    app = build_app(config, tmp_path)
    assert app.store.folders == []
    assert app.accounts.store is app.store


def test_parse_command_prints_record(capsys):
    assert _run(["parse", "Java后端工程师", "3年经验", "北京", "15k-25k"]) == 0

    record = json.loads(capsys.readouterr().out)
    assert record["position"]["title"] == "Java后端工程师"
    assert record["position"]["status"] == "new"


def test_parse_command_needs_input():
    assert _run(["parse"]) == 1


def test_add_then_list(tmp_path, capsys):
    data_dir = str(tmp_path)
    assert _run(["--data-dir", data_dir, "add", "--folder", "folder-2", "测试工程师", "上海"]) == 0
    assert "已添加至「外企」" in capsys.readouterr().out

    assert _run(["--data-dir", data_dir, "jobs", "--folder", "folder-2"]) == 0
    out = capsys.readouterr().out
    assert "微软中国" in out
    assert "测试工程师" in out


def test_folders_command(tmp_path, capsys):
    data_dir = str(tmp_path)
    assert _run(["--data-dir", data_dir, "folders", "--add", "校招", "--color", "coral"]) == 0
    out = capsys.readouterr().out
    assert "校招 (coral): 0 jobs" in out
    assert "互联网大厂 (blue): 2 jobs" in out


def test_schedule_command(tmp_path, capsys):
    assert _run(["--data-dir", str(tmp_path), "schedule", "--urgency", "overdue"]) == 0
    out = capsys.readouterr().out
    assert "国家电网" in out
    assert "字节跳动" not in out


def test_account_register_login_and_passwd(tmp_path, capsys):
    base = ["--data-dir", str(tmp_path), "account"]
    assert _run(base + ["register", "--nickname", "小明", "--email", "ming@example.com",
                        "--password", "secret123", "--confirm", "secret123"]) == 0
    out = capsys.readouterr().out
    assert "注册成功" in out
    assert "Signed in as 小明 <ming@example.com>" in out

    # The signed-in profile survives between invocations
    assert _run(base + ["passwd", "--old", "secret123", "--new", "newpass1", "--confirm", "newpass1"]) == 0
    assert "密码已修改" in capsys.readouterr().out

    assert _run(base + ["logout"]) == 0
    assert "Not signed in." in capsys.readouterr().out

    assert _run(base + ["login", "--email", "ming@example.com", "--password", "secret123"]) == 1
    assert "邮箱或密码错误" in capsys.readouterr().out
    assert _run(base + ["login", "--email", "ming@example.com", "--password", "newpass1"]) == 0


def test_account_register_validation_error(tmp_path, capsys):
    code = _run(["--data-dir", str(tmp_path), "account", "register", "--nickname", "小明",
                 "--email", "ming@example.com", "--password", "secret123", "--confirm", "secret999"])
    assert code == 1
    out = capsys.readouterr().out
    assert "<error> 两次输入的密码不一致" in out
    assert "Not signed in." in out


def test_chat_add_without_folders(tmp_path, capsys, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("seed_on_first_run: false\n", encoding="utf-8")
    lines = iter(["/add", "/quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    assert _run(["--config", str(config_path), "--data-dir", str(tmp_path / "data"), "chat"]) == 0
    assert "No folders yet" in capsys.readouterr().out
