"""Tests for npw.stages.scope."""

from pathlib import Path

from npw.stages.scope import describe, scope_args, workspace_path


class TestScopeArgs:
    def test_inserts_after_subcommand(self):
        args = ["run", "build"]
        assert scope_args(args, Path("/ws"), Path("/ws/pkgs/foo")) == ["run", "-w", "pkgs/foo", "build"]

    def test_input_not_mutated(self):
        args = ["run", "build"]
        scope_args(args, Path("/ws"), Path("/ws/pkgs/foo"))
        assert args == ["run", "build"]

    def test_unchanged_at_root(self):
        args = ["run", "build", "--", "--watch"]
        out = scope_args(args, Path("/ws"), Path("/ws"))
        assert out == args
        assert out is not args

    def test_single_token(self):
        assert scope_args(["install"], Path("/ws"), Path("/ws/a")) == ["install", "-w", "a"]

    def test_custom_flag(self):
        out = scope_args(["test"], Path("/ws"), Path("/ws/a/b"), scope_flag="--workspace")
        assert out == ["test", "--workspace", "a/b"]

    def test_option_like_tokens_kept_in_place(self):
        out = scope_args(["run", "lint", "--fix"], Path("/ws"), Path("/ws/a"))
        assert out == ["run", "-w", "a", "lint", "--fix"]


class TestWorkspacePath:
    def test_nested(self):
        assert workspace_path(Path("/ws"), Path("/ws/pkgs/foo/src")) == "pkgs/foo/src"


class TestDescribe:
    def test_quotes_tokens(self):
        assert describe("npm", ["run", "say", "hello world"]) == "npm run say 'hello world'"
