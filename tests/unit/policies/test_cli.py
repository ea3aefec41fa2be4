"""Tests for the yum policy CLI."""

import logging

import pytest

from osconfig_agent.policies.__main__ import load_repositories, main


@pytest.fixture(autouse=True)
def reset_agent_logger():
    yield
    logger = logging.getLogger("osconfig_agent")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_file(tmp_path):
    repo_file = tmp_path / "repos" / "managed.repo"
    repo_file.parent.mkdir()
    path = tmp_path / "config.yaml"
    path.write_text(
        f"policies:\n  yum:\n    repo_file: {repo_file}\n"
        "logging:\n  file_logging: false\n"
    )
    return path


@pytest.fixture
def repos_file(tmp_path):
    path = tmp_path / "repos.yaml"
    path.write_text(
        "yum_repositories:\n"
        "  - id: id1\n"
        "    displayName: displayName1\n"
        "    baseUrl: http://repo1-url/\n"
        "    gpgKeys:\n"
        "      - https://url/key1\n"
        "      - https://url/key2\n"
    )
    return path


class TestLoadRepositories:
    """Tests for loading repository policy files."""

    def test_mapping_root(self, repos_file):
        repos = load_repositories(str(repos_file))

        assert len(repos) == 1
        assert repos[0].gpg_keys == ("https://url/key1", "https://url/key2")

    def test_list_root(self, tmp_path):
        path = tmp_path / "repos.yaml"
        path.write_text("- id: a\n  base_url: http://a/\n- id: b\n  base_url: http://b/\n")

        assert [r.id for r in load_repositories(str(path))] == ["a", "b"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "repos.yaml"
        path.write_text("")

        assert load_repositories(str(path)) == []


class TestMain:
    """Tests for the CLI entry point."""

    def test_usage(self, capsys):
        """Test missing arguments print usage."""
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_apply(self, tmp_path, config_file, repos_file, capsys):
        """Test applying a policy writes the repo file."""
        assert main([str(repos_file), str(config_file)]) == 0

        content = (tmp_path / "repos" / "managed.repo").read_text()
        assert "gpgkey=https://url/key1\n       https://url/key2\n" in content
        assert "Status: success" in capsys.readouterr().out

    def test_missing_repos_file(self, tmp_path, config_file, capsys):
        """Test unreadable policy file fails cleanly."""
        assert main([str(tmp_path / "missing.yaml"), str(config_file)]) == 1
        assert "cannot load repositories" in capsys.readouterr().err

    def test_write_failure(self, tmp_path, repos_file, capsys):
        """Test a missing destination directory reports the stage."""
        config = tmp_path / "config.yaml"
        config.write_text(
            f"policies:\n  yum:\n    repo_file: {tmp_path / 'nope' / 'x.repo'}\n"
            "logging:\n  file_logging: false\n"
        )

        assert main([str(repos_file), str(config)]) == 1
        out = capsys.readouterr().out
        assert "Status: failed" in out
        assert "Stage: prepare" in out

    @pytest.mark.parametrize(
        "config_text",
        [
            "policies:\n  yum:\n    file_mode: \"9999\"\n",
            "logging:\n  level: VERBOSE\n  file_logging: false\n",
            "- not\n- a\n- mapping\n",
            "policies: [unclosed\n",
            "logging:\n  max_bytes: lots\n",
        ],
    )
    def test_invalid_config(self, tmp_path, repos_file, capsys, config_text):
        """Test a bad config file exits 1 with an error instead of a traceback."""
        config = tmp_path / "config.yaml"
        config.write_text(config_text)

        assert main([str(repos_file), str(config)]) == 1
        assert "invalid configuration" in capsys.readouterr().err
