"""TypeScript rendering of declaration graphs."""
import json
from typing import Optional, Sequence

from ..graph import (
    ARRAY,
    OBSERVABLE,
    OBSERVABLE_ARRAY,
    ArgumentRef,
    ArrayLiteral,
    Assign,
    ClassDeclaration,
    CompileUnit,
    Constant,
    Constructor,
    EnumDeclaration,
    ExpressionStatement,
    Field,
    FieldRef,
    ForEach,
    If,
    InterfaceDeclaration,
    Invoke,
    LogicalAnd,
    Method,
    Namespace,
    New,
    Parameter,
    Return,
    ThisRef,
    TypeReference,
    TypeRefExpr,
    VariableDeclaration,
    VariableRef,
    Wrap,
)

HEADER = "// Generated by clientgen. Do not edit by hand."

NUMBER_TYPES = {
    "Byte", "SByte", "Int16", "UInt16", "Int32", "UInt32", "Int64", "UInt64",
    "Single", "Double", "Decimal",
}

PRIMITIVES = {
    "System.String": "string",
    "System.Char": "string",
    "System.Guid": "string",
    "System.TimeSpan": "string",
    "System.Boolean": "boolean",
    "System.DateTime": "Date",
    "System.DateTimeOffset": "Date",
    "System.Object": "any",
    "System.Void": "void",
    **{f"System.{name}": "number" for name in NUMBER_TYPES},
}

ARRAY_LIKE = {
    ARRAY,
    "System.Collections.IEnumerable",
    "System.Collections.Generic.IEnumerable",
    "System.Collections.Generic.ICollection",
    "System.Collections.Generic.IList",
    "System.Collections.Generic.List",
    "System.Collections.Generic.IReadOnlyCollection",
    "System.Collections.Generic.IReadOnlyList",
    "System.Collections.Generic.HashSet",
    "System.Collections.Generic.ISet",
}

DICTIONARY_LIKE = {
    "System.Collections.Generic.Dictionary",
    "System.Collections.Generic.IDictionary",
    "System.Collections.Generic.IReadOnlyDictionary",
}


class TypeScriptPrinter:
    """Renders a CompileUnit as TypeScript.

    With ``ambient=True`` namespaces are emitted as ``declare namespace``,
    suitable for a ``.d.ts`` file. Reactive wrappers are rendered as their
    plain value types; see KnockoutTypeScriptPrinter for observable output.
    """

    indent = "    "

    def __init__(self, ambient: bool = False):
        self.ambient = ambient

    def render(
        self,
        unit: CompileUnit,
        references: Sequence[str] = (),
        declared: Optional[CompileUnit] = None,
    ) -> str:
        """Render a whole unit.

        ``references`` become triple-slash path references. Declarations that
        appear unchanged in ``declared`` (the unit behind those references) are
        left out, so enums are not declared twice.
        """
        lines = [HEADER]
        lines.extend(f'/// <reference path="{path}" />' for path in references)
        lines.append("")
        for namespace in unit.namespaces:
            if declared is not None:
                namespace = self._without_declared(namespace, declared)
                if not namespace.declarations:
                    continue
            lines.extend(self.namespace(namespace))
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"

    @staticmethod
    def _without_declared(namespace: Namespace, declared: CompileUnit) -> Namespace:
        kept = tuple(
            d for d in namespace.declarations
            if declared.find(namespace.name, d.name) != d
        )
        return namespace.model_copy(update={"declarations": kept})

    # --- declarations ---

    def namespace(self, namespace: Namespace) -> list[str]:
        if not namespace.name:
            lines: list[str] = []
            for declaration in namespace.declarations:
                lines.extend(self.declaration(declaration, 0, exported=False))
            return lines

        keyword = "declare namespace" if self.ambient else "namespace"
        lines = [f"{keyword} {namespace.name} {{"]
        for i, declaration in enumerate(namespace.declarations):
            if i:
                lines.append("")
            lines.extend(self.declaration(declaration, 1, exported=True))
        lines.append("}")
        return lines

    def declaration(self, declaration, depth: int, exported: bool) -> list[str]:
        if isinstance(declaration, EnumDeclaration):
            return self.enum(declaration, depth, exported)
        if isinstance(declaration, InterfaceDeclaration):
            return self.interface(declaration, depth, exported)
        return self.class_(declaration, depth, exported)

    def _modifiers(self, exported: bool, needs_declare: bool) -> str:
        if exported:
            return "export declare " if needs_declare and not self.ambient else "export "
        return "declare " if needs_declare or self.ambient else ""

    def _heading(self, keyword: str, name: str, type_parameters, base: Optional[TypeReference]) -> str:
        heading = f"{keyword} {name}"
        if type_parameters:
            heading += f"<{', '.join(type_parameters)}>"
        if base is not None:
            heading += f" extends {self.type_name(base)}"
        return heading

    def enum(self, declaration: EnumDeclaration, depth: int, exported: bool) -> list[str]:
        pad = self.indent * depth
        modifiers = self._modifiers(exported, needs_declare=False)
        lines = [f"{pad}{modifiers}enum {declaration.name} {{"]
        for member in declaration.members:
            if member.init is not None:
                lines.append(f"{pad}{self.indent}{member.name} = {self.expression(member.init)},")
            else:
                lines.append(f"{pad}{self.indent}{member.name},")
        lines.append(f"{pad}}}")
        return lines

    def interface(self, declaration: InterfaceDeclaration, depth: int, exported: bool) -> list[str]:
        pad = self.indent * depth
        prefix = "export " if exported else ""
        heading = self._heading("interface", declaration.name, declaration.type_parameters, declaration.base_type)
        lines = [f"{pad}{prefix}{heading} {{"]
        for member in declaration.members:
            lines.append(f"{pad}{self.indent}{member.name}: {self.type_name(member.type)};")
        lines.append(f"{pad}}}")
        return lines

    def class_(self, declaration: ClassDeclaration, depth: int, exported: bool) -> list[str]:
        """Classes without a constructor only carry signatures and are declared ambient."""
        pad = self.indent * depth
        modifiers = self._modifiers(exported, needs_declare=declaration.constructor is None)
        heading = self._heading("class", declaration.name, declaration.type_parameters, declaration.base_type)
        lines = [f"{pad}{modifiers}{heading} {{"]
        for member in declaration.members:
            if isinstance(member, Field):
                lines.append(f"{pad}{self.indent}public {member.name}: {self.type_name(member.type)};")
            elif isinstance(member, Constructor):
                lines.extend(self.constructor(member, depth + 1))
            else:
                lines.extend(self.method(member, depth + 1))
        lines.append(f"{pad}}}")
        return lines

    def _parameters(self, parameters: tuple[Parameter, ...]) -> str:
        return ", ".join(f"{p.name}: {self.type_name(p.type)}" for p in parameters)

    def constructor(self, constructor: Constructor, depth: int) -> list[str]:
        pad = self.indent * depth
        lines = [f"{pad}constructor({self._parameters(constructor.parameters)}) {{"]
        if constructor.base_arguments:
            arguments = ", ".join(self.expression(a) for a in constructor.base_arguments)
            lines.append(f"{pad}{self.indent}super({arguments});")
        for statement in constructor.body:
            lines.extend(self.statement(statement, depth + 1))
        lines.append(f"{pad}}}")
        return lines

    def method(self, method: Method, depth: int) -> list[str]:
        pad = self.indent * depth
        returns = self.type_name(method.return_type) if method.return_type else "void"
        name = method.name
        if method.type_parameters:
            name += f"<{', '.join(method.type_parameters)}>"
        signature = f"{name}({self._parameters(method.parameters)}): {returns}"
        if method.is_static:
            signature = f"public static {signature}"
        if not method.body:
            return [f"{pad}{signature};"]
        lines = [f"{pad}{signature} {{"]
        for statement in method.body:
            lines.extend(self.statement(statement, depth + 1))
        lines.append(f"{pad}}}")
        return lines

    # --- statements and expressions ---

    def statement(self, statement, depth: int) -> list[str]:
        pad = self.indent * depth
        if isinstance(statement, Assign):
            return [f"{pad}{self.expression(statement.target)} = {self.expression(statement.value)};"]
        if isinstance(statement, VariableDeclaration):
            declared = f"{statement.name}: {self.type_name(statement.type)}"
            if statement.value is None:
                return [f"{pad}let {declared};"]
            return [f"{pad}const {declared} = {self.expression(statement.value)};"]
        if isinstance(statement, ExpressionStatement):
            return [f"{pad}{self.expression(statement.expression)};"]
        if isinstance(statement, Return):
            if statement.value is None:
                return [f"{pad}return;"]
            return [f"{pad}return {self.expression(statement.value)};"]

        if isinstance(statement, If):
            lines = [f"{pad}if ({self.expression(statement.condition)}) {{"]
        elif isinstance(statement, ForEach):
            lines = [f"{pad}for (const {statement.variable} of {self.expression(statement.iterable)}) {{"]
        else:
            raise TypeError(f"Cannot render statement node {type(statement).__name__}")
        for inner in statement.body:
            lines.extend(self.statement(inner, depth + 1))
        lines.append(f"{pad}}}")
        return lines

    def expression(self, expression) -> str:
        if isinstance(expression, (ArgumentRef, VariableRef)):
            return expression.name
        if isinstance(expression, ThisRef):
            return "this"
        if isinstance(expression, FieldRef):
            return f"{self.expression(expression.target)}.{expression.name}"
        if isinstance(expression, LogicalAnd):
            return f"{self.expression(expression.left)} && {self.expression(expression.right)}"
        if isinstance(expression, Invoke):
            arguments = ", ".join(self.expression(a) for a in expression.arguments)
            return f"{self.expression(expression.target)}.{expression.method}({arguments})"
        if isinstance(expression, New):
            arguments = ", ".join(self.expression(a) for a in expression.arguments)
            return f"new {self.type_name(expression.type)}({arguments})"
        if isinstance(expression, TypeRefExpr):
            # Static members are reached through the bare type name
            return expression.type.name
        if isinstance(expression, ArrayLiteral):
            return "[]"
        if isinstance(expression, Constant):
            return json.dumps(expression.value)
        if isinstance(expression, Wrap):
            return self.wrap(expression)
        raise TypeError(f"Cannot render expression node {type(expression).__name__}")

    def wrap(self, expression: Wrap) -> str:
        return self.expression(expression.value)

    # --- types ---

    def type_name(self, reference: Optional[TypeReference]) -> str:
        if reference is None:
            return "any"

        name, arguments = reference.name, reference.arguments
        if name in (OBSERVABLE, OBSERVABLE_ARRAY):
            inner = self.type_name(arguments[0]) if arguments else "any"
            return self.reactive_type(name == OBSERVABLE_ARRAY, inner)
        if name in PRIMITIVES and not arguments:
            return PRIMITIVES[name]
        if name == "System.Nullable" and len(arguments) == 1:
            return self.type_name(arguments[0])
        if name in ARRAY_LIKE:
            return f"{self.type_name(arguments[0])}[]" if len(arguments) == 1 else "any[]"
        if name in DICTIONARY_LIKE:
            if len(arguments) != 2:
                return "{ [key: string]: any }"
            key = "number" if self.type_name(arguments[0]) == "number" else "string"
            return f"{{ [key: {key}]: {self.type_name(arguments[1])} }}"
        if name.startswith("System."):
            return "any"
        if arguments:
            return f"{name}<{', '.join(self.type_name(a) for a in arguments)}>"
        return name

    def reactive_type(self, collection: bool, inner: str) -> str:
        return f"{inner}[]" if collection else inner


class KnockoutTypeScriptPrinter(TypeScriptPrinter):
    """TypeScript printer whose reactive wrappers are Knockout observables."""

    def reactive_type(self, collection: bool, inner: str) -> str:
        if collection:
            return f"KnockoutObservableArray<{inner}>"
        return f"KnockoutObservable<{inner}>"

    def wrap(self, expression: Wrap) -> str:
        factory = "observableArray" if expression.collection else "observable"
        return f"ko.{factory}({self.expression(expression.value)})"
