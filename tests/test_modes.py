import logging

import pytest

from ModeSitter.buffer import TextBuffer
from ModeSitter.constants import FUNDAMENTAL_MODE
from ModeSitter.errors import UnknownMode
from ModeSitter.languages import register_builtin_modes
from ModeSitter.modes import MODES, ModeProperties, ModeRegistry, normalize_extension
from ModeSitter.session import BufferSession


@pytest.fixture
def registry():
    return ModeRegistry()


class TestResolve:
    @pytest.fixture(autouse=True)
    def builtin(self):
        register_builtin_modes()

    # fmt: off
    @pytest.mark.parametrize(
        "path, mode",
        [
            pytest.param("notes/foo.md",       "markdown-mode",  id="md"),
            pytest.param("foo.MD",             "markdown-mode",  id="md_upper"),
            pytest.param("README.Markdown",    "markdown-mode",  id="markdown_mixed"),
            pytest.param("main.rs",            "rust-mode",      id="rust"),
            pytest.param("script.jl",          "julia-mode",     id="julia"),
            pytest.param("tool.py",            "python-mode",    id="python"),
            pytest.param("foo.unknown",        FUNDAMENTAL_MODE, id="unknown"),
            pytest.param("Makefile",           FUNDAMENTAL_MODE, id="no_extension"),
            pytest.param("archive.tar.gz",     FUNDAMENTAL_MODE, id="last_extension_only"),
        ],
    )
    # fmt: on
    def test_resolve(self, path, mode):
        assert MODES.resolve(path) == mode

    def test_case_insensitive(self):
        assert MODES.resolve("foo.MD") == MODES.resolve("foo.md")

    def test_configured_default(self):
        MODES.set_default_mode("markdown-mode")
        assert MODES.resolve("foo.unknown") == "markdown-mode"

    def test_caller_default(self):
        assert MODES.resolve("foo.unknown", "rust-mode") == "rust-mode"
        assert MODES.resolve("foo.md", "rust-mode") == "markdown-mode"
        assert MODES.default_mode == FUNDAMENTAL_MODE

    def test_list_modes(self):
        assert MODES.list_modes() == sorted(
            [FUNDAMENTAL_MODE, "julia-mode", "markdown-mode", "python-mode", "rust-mode"]
        )

    def test_builtin_registration_is_idempotent(self):
        register_builtin_modes()
        assert len(MODES.list_modes()) == 5
        assert MODES.mode_extensions("markdown-mode") == (".md", ".markdown", ".mkd", ".mdown")


class TestRegister:
    # fmt: off
    @pytest.mark.parametrize(
        "ext, normal",
        [
            pytest.param(".md",  ".md", id="dotted"),
            pytest.param("md",   ".md", id="bare"),
            pytest.param(".MD",  ".md", id="upper"),
            pytest.param(" rs ", ".rs", id="padded"),
        ],
    )
    # fmt: on
    def test_normalize_extension(self, ext, normal):
        assert normalize_extension(ext) == normal

    def test_fundamental_always_registered(self, registry):
        assert registry.has_mode(FUNDAMENTAL_MODE)
        assert registry.default_mode == FUNDAMENTAL_MODE
        registry.reset()
        assert registry.list_modes() == [FUNDAMENTAL_MODE]

    def test_reregister_replaces(self, registry):
        registry.register("text-mode", ["txt", ".text"])
        mode = registry.register("text-mode", [".TXT"], properties=ModeProperties(show_gutter=False))
        assert registry.get("text-mode") is mode
        assert registry.resolve("a.txt") == "text-mode"
        assert registry.resolve("a.text") == FUNDAMENTAL_MODE  # stale extension unbound
        assert not registry.get("text-mode").properties.show_gutter

    def test_last_writer_wins_extension(self, registry):
        registry.register("a-mode", [".x"])
        registry.register("b-mode", [".x"])
        assert registry.resolve("f.x") == "b-mode"
        registry.register("a-mode", [".y"])
        assert registry.resolve("f.x") == "b-mode"

    def test_unknown_mode(self, registry):
        with pytest.raises(UnknownMode):
            registry.get("nope-mode")
        with pytest.raises(UnknownMode):
            registry.set_default_mode("nope-mode")
        assert registry.default_mode == FUNDAMENTAL_MODE


class TestLifecycle:
    @pytest.fixture
    def calls(self):
        return []

    def test_activation_applies_properties_then_init(self, registry, calls):
        buffer = TextBuffer("x")

        def init(session):
            calls.append(("init", session.buffer.showGutter()))

        registry.register("quiet-mode", [".q"], init=init, properties=ModeProperties(show_gutter=False))
        session = BufferSession(buffer, registry=registry)
        assert session.open("a.q") == "quiet-mode"
        assert calls == [("init", False)]

    def test_after_change_hook(self, registry, calls):
        def after_change(session, change):
            calls.append(change)

        registry.register("watch-mode", [".w"], after_change=after_change)
        buffer = TextBuffer("abc")
        session = BufferSession(buffer, registry=registry)
        session.open("a.w")
        session.notify_changed(buffer.insert(1, "zz"))
        assert calls == [(1, 0, 2)]

    def test_failing_hooks_are_contained(self, registry, caplog):
        def explode(*args):
            raise RuntimeError("boom")

        registry.register("bad-mode", [".bad"], init=explode, after_change=explode)
        buffer = TextBuffer("abc")
        session = BufferSession(buffer, registry=registry)

        with caplog.at_level(logging.ERROR, logger="ModeSitter.modes"):
            assert session.open("x.bad") == "bad-mode"
            assert not registry.on_buffer_changed("bad-mode", session, buffer.insert(0, "q"))
        assert "boom" in caplog.text
        assert session.mode_name == "bad-mode"
