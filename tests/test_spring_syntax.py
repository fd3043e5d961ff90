from pathlib import Path
import textwrap

from routeguard.domain.diagnostics import Diagnostics
from routeguard.domain.errors import ErrorKind
from routeguard.domain.models import ABSENT, EnumRef, Expression, ListValue, LiteralValue
from routeguard.extractors.spring.syntax import (
    JavaSyntaxModel,
    load_syntax_model,
    parse_java_source,
)


SRC = """
package com.example.web;

import org.springframework.web.bind.annotation.GetMapping;
import org.springframework.web.bind.annotation.RequestMapping;
import org.springframework.web.bind.annotation.RequestMethod;
import org.springframework.web.bind.annotation.RestController;

@RestController
@RequestMapping({"/api", "/v1"})
public class ItemController {

    @GetMapping("/items")
    public String list() { return ""; }

    @RequestMapping(path = "/items/" + "{id}", method = {RequestMethod.PUT, RequestMethod.POST})
    public String update(String id, int[] values, Object... rest) { return ""; }

    @org.springframework.web.bind.annotation.DeleteMapping(value = Paths.build())
    public void remove() { }

    public void helper() { }

    @RestController
    public static class Nested {
        @GetMapping
        public String ping() { return "pong"; }
    }
}

interface NotAClass {
    @GetMapping("/x")
    String x();
}
"""


def test_parse_collects_classes_with_qualified_names():
    classes = parse_java_source(SRC, file_path="ItemController.java")
    names = [c.qualified_name for c in classes]
    assert names == ["com.example.web.ItemController", "com.example.web.ItemController.Nested"]
    assert classes[0].file_path == "ItemController.java"


def test_parse_methods_and_signatures():
    cls = parse_java_source(SRC)[0]
    assert [m.name for m in cls.methods] == ["list", "update", "remove", "helper"]
    update = cls.methods[1]
    assert update.signature == "update(String,int[],Object[])"
    assert update.path == "com.example.web.ItemController#update(String,int[],Object[])"


def test_annotation_arguments_are_converted():
    cls = parse_java_source(SRC)[0]
    model = JavaSyntaxModel([cls])

    mapping = model.class_annotation(cls, "RequestMapping")
    assert model.annotation_argument(mapping, "value") == ListValue(
        (LiteralValue("/api"), LiteralValue("/v1"))
    )
    assert model.annotation_argument(mapping, "method") == ABSENT

    update = cls.methods[1]
    ann = model.annotations_of(update)[0]
    assert model.annotation_argument(ann, "path") == LiteralValue("/items/{id}")
    assert model.annotation_argument(ann, "method") == ListValue(
        (EnumRef("PUT", "RequestMethod"), EnumRef("POST", "RequestMethod"))
    )

    remove = cls.methods[2]
    ann = model.annotations_of(remove)[0]
    assert ann.name == "DeleteMapping"
    assert model.annotation_argument(ann, "value") == Expression("Paths.build()")


def test_owner_path_uses_imports_for_annotation_type():
    cls = parse_java_source(SRC)[0]
    model = JavaSyntaxModel([cls])

    class_ann = model.class_annotation(cls, "RequestMapping")
    assert model.owner_path(class_ann) == (
        "com.example.web.ItemController@org.springframework.web.bind.annotation.RequestMapping"
    )

    get = model.annotations_of(cls.methods[0])[0]
    assert model.owner_path(get) == (
        "com.example.web.ItemController#list()@org.springframework.web.bind.annotation.GetMapping"
    )


def test_model_queries_filter_by_annotation_name():
    model = JavaSyntaxModel.from_sources({"ItemController.java": SRC})
    controllers = model.find_classes_with_any_annotation({"RestController"})
    assert len(controllers) == 2

    handlers = model.methods_with_any_annotation(controllers[0], {"GetMapping", "RequestMapping"})
    assert [m.name for m in handlers] == ["list", "update"]
    assert model.class_annotation(controllers[1], "RequestMapping") is None


def test_string_literal_escapes_are_decoded():
    src = """
    class A {
        @PreAuthorize("hasRole(\\"ADMIN\\") and #id != '\\u0041'")
        void a() { }
    }
    """
    cls = parse_java_source(src)[0]
    ann = cls.methods[0].annotations[0]
    assert ann.arguments["value"] == LiteralValue("hasRole(\"ADMIN\") and #id != 'A'")


def test_load_syntax_model_reports_unparseable_files(tmp_path: Path):
    good = tmp_path / "Good.java"
    bad = tmp_path / "Bad.java"
    good.write_text(textwrap.dedent("""
        @RestController
        class Good {
            @GetMapping("/ok")
            String ok() { return ""; }
        }
    """), encoding="utf-8")
    bad.write_text("class Bad { void broken( }", encoding="utf-8")

    diagnostics = Diagnostics()
    model = load_syntax_model([bad, good], diagnostics, repo_root=tmp_path)

    assert [c.qualified_name for c in model.classes] == ["Good"]
    assert len(diagnostics) == 1
    diag = diagnostics.items[0]
    assert diag.path == "Bad.java"
    assert diag.kind == ErrorKind.SOURCE_PARSE_ERROR
    assert diagnostics.failed
