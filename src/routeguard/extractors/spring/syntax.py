from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import javalang

from routeguard.domain.diagnostics import Diagnostics
from routeguard.domain.errors import ErrorKind
from routeguard.domain.models import (
    ABSENT,
    AnnotationValue,
    EnumRef,
    Expression,
    ListValue,
    LiteralValue,
)

logger = logging.getLogger(__name__)

_PARSE_ERRORS = (javalang.parser.JavaSyntaxError, javalang.tokenizer.LexerError)

_ESCAPE = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-7]{1,3}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"b": "\b", "t": "\t", "n": "\n", "f": "\f", "r": "\r", "s": " "}


@dataclass(frozen=True)
class AnnotationRef:
    name: str                   # simple name: GetMapping
    qualified_name: str         # best-effort: org.springframework...GetMapping
    owner: str                  # path of the annotated class or method
    arguments: dict[str, AnnotationValue] = field(default_factory=dict)


@dataclass(frozen=True)
class MethodDecl:
    name: str
    signature: str
    declaring_class: str
    annotations: tuple[AnnotationRef, ...] = ()

    @property
    def path(self) -> str:
        return f"{self.declaring_class}#{self.signature}"


@dataclass(frozen=True)
class ClassDecl:
    qualified_name: str
    file_path: str = ""
    annotations: tuple[AnnotationRef, ...] = ()
    methods: tuple[MethodDecl, ...] = ()

    @property
    def path(self) -> str:
        return self.qualified_name


Declaration = Union[ClassDecl, MethodDecl]


class JavaSyntaxModel:
    """Query surface over the class and method declarations of a Java source tree."""

    def __init__(self, classes: Iterable[ClassDecl] = ()):
        self.classes: list[ClassDecl] = list(classes)

    @classmethod
    def from_sources(cls, sources: dict[str, str]) -> "JavaSyntaxModel":
        classes: list[ClassDecl] = []
        for file_path, source in sources.items():
            classes.extend(parse_java_source(source, file_path=file_path))
        return cls(classes)

    def find_classes_with_any_annotation(self, names: Iterable[str]) -> list[ClassDecl]:
        wanted = set(names)
        return [c for c in self.classes if any(a.name in wanted for a in c.annotations)]

    def class_annotation(self, cls: ClassDecl, name: str) -> Optional[AnnotationRef]:
        for ann in cls.annotations:
            if ann.name == name:
                return ann
        return None

    def methods_with_any_annotation(self, cls: ClassDecl, names: Iterable[str]) -> list[MethodDecl]:
        wanted = set(names)
        return [m for m in cls.methods if any(a.name in wanted for a in m.annotations)]

    def annotations_of(self, decl: Declaration) -> list[AnnotationRef]:
        return list(decl.annotations)

    def annotation_argument(self, annotation: AnnotationRef, name: str) -> AnnotationValue:
        return annotation.arguments.get(name, ABSENT)

    def owner_path(self, annotation: AnnotationRef) -> str:
        return f"{annotation.owner}@{annotation.qualified_name}"


# ----------------------------
# Loading
# ----------------------------


def load_syntax_model(
    files: Iterable[Path],
    diagnostics: Diagnostics,
    repo_root: Optional[Path] = None,
) -> JavaSyntaxModel:
    """Parse every file; files that fail to read or parse are reported and skipped."""
    classes: list[ClassDecl] = []
    for path in files:
        label = os.path.relpath(str(path), str(repo_root)) if repo_root else str(path)
        try:
            source = path.read_bytes().decode("utf-8", errors="ignore")
        except OSError as exc:
            diagnostics.report(label, f"Could not read source file: {exc}", ErrorKind.SOURCE_PARSE_ERROR)
            continue

        try:
            parsed = parse_java_source(source, file_path=label)
        except _PARSE_ERRORS as exc:
            detail = getattr(exc, "description", None) or str(exc) or type(exc).__name__
            diagnostics.report(label, f"Could not parse source file: {detail}", ErrorKind.SOURCE_PARSE_ERROR)
            continue

        logger.debug("%s: %d class declaration(s)", label, len(parsed))
        classes.extend(parsed)
    return JavaSyntaxModel(classes)


def parse_java_source(source: str, file_path: str = "") -> list[ClassDecl]:
    """
    Parse one compilation unit and return its class declarations, nested
    classes included, in declaration order. Raises javalang's parse errors.
    """
    tree = javalang.parse.parse(source)
    package = tree.package.name if tree.package is not None else ""
    imports = _import_table(tree)

    out: list[ClassDecl] = []
    for type_decl in tree.types or []:
        _collect_classes(type_decl, package, imports, file_path, out)
    return out


def _import_table(tree: Any) -> dict[str, str]:
    table: dict[str, str] = {}
    for imp in tree.imports or []:
        if imp.static or imp.wildcard:
            continue
        table[imp.path.rsplit(".", 1)[-1]] = imp.path
    return table


def _collect_classes(
    node: Any,
    enclosing: str,
    imports: dict[str, str],
    file_path: str,
    out: list[ClassDecl],
) -> None:
    if not isinstance(node, javalang.tree.TypeDeclaration):
        return

    qualified = f"{enclosing}.{node.name}" if enclosing else node.name
    body = _body_of(node)

    if isinstance(node, javalang.tree.ClassDeclaration):
        methods = tuple(
            _method_decl(member, qualified, imports)
            for member in body
            if isinstance(member, javalang.tree.MethodDeclaration)
        )
        out.append(
            ClassDecl(
                qualified_name=qualified,
                file_path=file_path,
                annotations=tuple(_annotation_ref(a, qualified, imports) for a in node.annotations or []),
                methods=methods,
            )
        )

    for member in body:
        _collect_classes(member, qualified, imports, file_path, out)


def _body_of(node: Any) -> list[Any]:
    body = node.body
    # enum bodies wrap their members
    if hasattr(body, "declarations"):
        body = body.declarations
    return list(body or [])


def _method_decl(node: Any, declaring_class: str, imports: dict[str, str]) -> MethodDecl:
    signature = _signature(node)
    owner = f"{declaring_class}#{signature}"
    return MethodDecl(
        name=node.name,
        signature=signature,
        declaring_class=declaring_class,
        annotations=tuple(_annotation_ref(a, owner, imports) for a in node.annotations or []),
    )


def _signature(node: Any) -> str:
    params = []
    for p in node.parameters or []:
        text = _type_text(p.type)
        if getattr(p, "varargs", False):
            text += "[]"
        params.append(text)
    return f"{node.name}({','.join(params)})"


def _type_text(t: Any) -> str:
    if t is None:
        return "?"
    name = t.name
    sub = getattr(t, "sub_type", None)
    while sub is not None:
        name = f"{name}.{sub.name}"
        sub = getattr(sub, "sub_type", None)
    return name + "[]" * len(t.dimensions or [])


def _annotation_ref(node: Any, owner: str, imports: dict[str, str]) -> AnnotationRef:
    simple = node.name.rsplit(".", 1)[-1]
    qualified = node.name if "." in node.name else imports.get(simple, simple)
    return AnnotationRef(
        name=simple,
        qualified_name=qualified,
        owner=owner,
        arguments=_arguments(node.element),
    )


def _arguments(element: Any) -> dict[str, AnnotationValue]:
    if element is None:
        return {}
    # @X(a = 1, b = 2) arrives as a list of pairs; @X(1) as a bare value
    if isinstance(element, list):
        return {pair.name: to_annotation_value(pair.value) for pair in element}
    return {"value": to_annotation_value(element)}


# ----------------------------
# Values
# ----------------------------


def to_annotation_value(node: Any) -> AnnotationValue:
    tree = javalang.tree

    if isinstance(node, tree.Literal):
        text = _string_literal(node.value)
        if text is None or node.prefix_operators:
            return Expression(render_expression(node))
        return LiteralValue(text)

    if isinstance(node, tree.ElementArrayValue):
        return ListValue(tuple(to_annotation_value(v) for v in node.values or []))

    if isinstance(node, tree.ArrayInitializer):
        return ListValue(tuple(to_annotation_value(v) for v in node.initializers or []))

    if isinstance(node, tree.MemberReference) and not node.selectors:
        return EnumRef(name=node.member, qualifier=node.qualifier or "")

    if isinstance(node, tree.BinaryOperation):
        folded = _fold_concat(node)
        if folded is not None:
            return LiteralValue(folded)

    return Expression(render_expression(node))


def _fold_concat(node: Any) -> Optional[str]:
    if isinstance(node, javalang.tree.Literal):
        return _string_literal(node.value)
    if isinstance(node, javalang.tree.BinaryOperation) and node.operator == "+":
        left = _fold_concat(node.operandl)
        right = _fold_concat(node.operandr)
        if left is not None and right is not None:
            return left + right
    return None


def _string_literal(raw: str) -> Optional[str]:
    if raw.startswith('"""') and raw.endswith('"""') and len(raw) >= 6:
        body = raw[3:-3]
        # text blocks start after the line terminator following the opening quotes
        if "\n" in body:
            body = body.split("\n", 1)[1]
        return _unescape(body)
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return _unescape(raw[1:-1])
    return None


def _unescape(text: str) -> str:
    def repl(m: re.Match) -> str:
        esc = m.group(1)
        if esc[0] == "u":
            return chr(int(esc.lstrip("u"), 16))
        if esc[0] in "01234567":
            return chr(int(esc, 8))
        return _SIMPLE_ESCAPES.get(esc, esc)

    return _ESCAPE.sub(repl, text)


def render_expression(node: Any) -> str:
    # best-effort source form, used for messages and non-literal guard expressions
    tree = javalang.tree
    if node is None:
        return ""
    if isinstance(node, tree.Literal):
        return "".join(node.prefix_operators or []) + node.value
    if isinstance(node, tree.MemberReference):
        return f"{node.qualifier}.{node.member}" if node.qualifier else node.member
    if isinstance(node, tree.MethodInvocation):
        args = ", ".join(render_expression(a) for a in node.arguments or [])
        target = f"{node.qualifier}.{node.member}" if node.qualifier else node.member
        return f"{target}({args})"
    if isinstance(node, tree.BinaryOperation):
        return f"{render_expression(node.operandl)} {node.operator} {render_expression(node.operandr)}"
    if isinstance(node, tree.ElementArrayValue):
        return "{" + ", ".join(render_expression(v) for v in node.values or []) + "}"
    if isinstance(node, tree.Annotation):
        return f"@{node.name}"
    return node.__class__.__name__
