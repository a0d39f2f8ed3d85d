"""Tests for tbmaker.generator.dispatcher -- per-category fan-out."""

from __future__ import annotations

from pathlib import Path

import pytest

from tbmaker.exceptions import TemplateError
from tbmaker.generator.dispatcher import Dispatcher, load_template
from tbmaker.generator.renderer import Renderer
from tbmaker.models import CodeBase, GenerationReport, Generator, Member


def _dispatcher(tree, codebase: CodeBase) -> Dispatcher:
    renderer = Renderer(tree.generators, templates=tree.templates)
    return Dispatcher(codebase, renderer, tree.generators, GenerationReport())


class TestLoadTemplate:
    def test_body_and_destination(self, tree) -> None:
        path = tree.add_template(
            "groups", "g.tmpl", "docs/[[reason]]_[[group]].md", "# [{GROUP}] ([{REASON}])\n"
        )
        body, dest = load_template(path, group="Chain Data", reason="readme")
        assert body == "# Chain Data (readme)\n"
        assert dest == "docs/chifra/chain data.md"

    def test_non_utf8_body_bytes_kept(self, tree, sample_codebase: CodeBase) -> None:
        path = tree.generators / "codebase" / "latin.tmpl"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"/*\noutput: latin.txt\n*/\ncaf\xe9 {{ codebase.commands | length }}\n")

        _dispatcher(tree, sample_codebase).dispatch(
            Generator(against="codebase", templates=["latin.tmpl"])
        )

        assert Path("latin.txt").read_bytes() == b"caf\xe9 2\n"

    def test_missing_file(self, tree) -> None:
        with pytest.raises(TemplateError, match="Could not find generator file"):
            load_template(tree.generators / "routes" / "nope.tmpl")

    def test_missing_metadata(self, tree) -> None:
        path = tree.add_raw_template("routes", "old.tmpl", "package x\n")
        with pytest.raises(TemplateError, match="Old style templates should be gone"):
            load_template(path)

    def test_odd_markers(self, tree) -> None:
        path = tree.add_template("routes", "odd.tmpl", "a.go", "// EXISTING_CODE\n")
        with pytest.raises(TemplateError, match="even number"):
            load_template(path, route="blocks")

    def test_unresolved_placeholder(self, tree) -> None:
        path = tree.add_template("routes", "bad.tmpl", "x/[[Thing]].go")
        with pytest.raises(TemplateError, match="unresolved placeholder"):
            load_template(path, route="blocks")


class TestCodebase:
    def test_rendered_once(self, tree, sample_codebase: CodeBase) -> None:
        tree.add_template("codebase", "readme.tmpl", "README.md", "{{ codebase.commands | length }} commands\n")
        dispatcher = _dispatcher(tree, sample_codebase)

        dispatcher.dispatch(Generator(against="codebase", templates=["readme.tmpl"]))

        assert Path("README.md").read_text() == "2 commands\n"
        assert dispatcher.report.outputs == ["README.md"]


class TestGroups:
    def test_reason_outer_group_inner(self, tree, sample_codebase: CodeBase) -> None:
        tree.add_template(
            "groups", "doc.tmpl", "docs/[[reason]]_[[group]].md",
            "# [{GROUP}] {{ reason }} {{ group.structures | length }}\n",
        )
        dispatcher = _dispatcher(tree, sample_codebase)

        dispatcher.dispatch(Generator(against="groups", templates=["doc.tmpl"]))

        assert dispatcher.report.outputs == [
            "docs/chifra/admin.md",
            "docs/chifra/chain data.md",
            "docs/data-model/admin.md",
            "docs/data-model/chain data.md",
        ]
        assert Path("docs/data-model/chain data.md").read_text() == "# Chain Data model 1\n"

    def test_templates_inside_reason_loop(self, tree) -> None:
        codebase = CodeBase.model_validate(
            {"structures": [{"name": "Block", "class": "block", "group": "G"}]}
        )
        tree.add_template("groups", "a.tmpl", "[[reason]]_a.md", "a\n")
        tree.add_template("groups", "b.tmpl", "[[reason]]_b.md", "b\n")
        dispatcher = _dispatcher(tree, codebase)

        dispatcher.dispatch(Generator(against="groups", templates=["a.tmpl", "b.tmpl"]))

        assert dispatcher.report.outputs == [
            "chifra/a.md",
            "chifra/b.md",
            "data-model/a.md",
            "data-model/b.md",
        ]


class TestRoutes:
    def test_one_file_per_command(self, tree, sample_codebase: CodeBase) -> None:
        tree.add_template("routes", "cmd.tmpl", "cmd/[[route]]/[[Route]].go", "package {{ item.route }}\n")
        dispatcher = _dispatcher(tree, sample_codebase)

        dispatcher.dispatch(Generator(against="routes", templates=["cmd.tmpl"]))

        assert dispatcher.report.outputs == ["cmd/blocks/Blocks.go", "cmd/daemon/Daemon.go"]
        assert Path("cmd/daemon/Daemon.go").read_text() == "package daemon\n"

    def test_gate_skips_daemon_sdk(self, tree, sample_codebase: CodeBase) -> None:
        tree.add_template("routes", "sdk_go.tmpl", "sdk/[[route]].go", "x\n")
        dispatcher = _dispatcher(tree, sample_codebase)

        dispatcher.dispatch(Generator(against="routes", templates=["sdk_go.tmpl"]))

        assert dispatcher.report.outputs == ["sdk/blocks.go"]
        assert dispatcher.report.skipped == 1
        assert not Path("sdk/daemon.go").exists()


class TestTypes:
    def test_sorted_members_and_disabled_skipped(self, tree, sample_codebase: CodeBase) -> None:
        tree.add_template(
            "types", "type.tmpl", "pkg/[[route]]/[[Type]].go",
            "{% for m in item.members %}{{ m.name }};{% endfor %}\n",
        )
        dispatcher = _dispatcher(tree, sample_codebase)

        dispatcher.dispatch(Generator(against="types", templates=["type.tmpl"]))

        assert dispatcher.report.outputs == ["pkg/scrape/Manifest.go", "pkg/block/Block.go"]
        assert Path("pkg/scrape/Manifest.go").read_text() == "chain;version;chunks;\n"
        assert not Path("pkg/hidden").exists()

    def test_disabled_structure_members_sorted(self, tree, sample_codebase: CodeBase) -> None:
        hidden = sample_codebase.structures[2]
        hidden.members = [Member(name="b"), Member(name="a")]
        tree.add_template("types", "type.tmpl", "pkg/[[Type]].go", "x\n")

        _dispatcher(tree, sample_codebase).dispatch(
            Generator(against="types", templates=["type.tmpl"])
        )

        assert [m.name for m in hidden.members] == ["a", "b"]

    def test_facet_fan_out(self, tree, sample_codebase: CodeBase) -> None:
        tree.add_template(
            "types", "facet.tmpl", "views/[[type]]/-facet-/data.go",
            "{{ facet.name }} of {{ structure.name }}\n",
        )
        dispatcher = _dispatcher(tree, sample_codebase)

        dispatcher.dispatch(Generator(against="types", templates=["facet.tmpl"]))

        assert dispatcher.report.outputs == [
            "views/manifest/indexdata/data.go",
            "views/manifest/stats/data.go",
        ]
        assert Path("views/manifest/stats/data.go").read_text() == "Stats of Manifest\n"
        assert not Path("views/manifest/-facet-").exists()


class TestDispatch:
    def test_unknown_against(self, tree, sample_codebase: CodeBase) -> None:
        dispatcher = _dispatcher(tree, sample_codebase)
        with pytest.raises(TemplateError, match="unknown against value: widgets"):
            dispatcher.dispatch(Generator(against="widgets", templates=["a.tmpl"]))

    def test_second_pass_writes_nothing(self, tree, sample_codebase: CodeBase) -> None:
        tree.add_template("routes", "cmd.tmpl", "cmd/[[route]].go", "package {{ item.route }}\n")
        generator = Generator(against="routes", templates=["cmd.tmpl"])
        _dispatcher(tree, sample_codebase).dispatch(generator)

        again = _dispatcher(tree, sample_codebase)
        again.dispatch(generator)

        assert again.report.written == 0
        assert again.report.unchanged == 2
