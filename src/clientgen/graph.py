"""Declaration graph produced by translation and consumed by code printers.

Nodes are frozen pydantic models: a graph is built bottom-up once per run and
never mutated afterwards. Each node carries a ``node`` tag so the whole graph
round-trips through JSON.
"""

from pydantic import BaseModel, ConfigDict, Field as ModelField
from typing import Annotated, Any, Literal, Optional, Union

# Well-known reference names understood by printers
ARRAY = "Array"
OBSERVABLE = "Observable"
OBSERVABLE_ARRAY = "ObservableArray"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class TypeReference(_Node):
    """Reference to a named type, optionally with type arguments."""

    name: str
    arguments: tuple["TypeReference", ...] = ()

    @property
    def namespace(self) -> Optional[str]:
        namespace, _, _ = self.name.rpartition(".")
        return namespace or None

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2]

    def __str__(self) -> str:
        if self.name == ARRAY and len(self.arguments) == 1:
            return f"{self.arguments[0]}[]"
        if self.arguments:
            return f"{self.name}<{', '.join(str(a) for a in self.arguments)}>"
        return self.name


def array_of(element: TypeReference) -> TypeReference:
    return TypeReference(name=ARRAY, arguments=(element,))


# === Expressions ===

class ArgumentRef(_Node):
    node: Literal["argument"] = "argument"
    name: str


class VariableRef(_Node):
    node: Literal["variable"] = "variable"
    name: str


class ThisRef(_Node):
    node: Literal["this"] = "this"


class FieldRef(_Node):
    """``target.name``"""

    node: Literal["field_ref"] = "field_ref"
    target: "Expression"
    name: str


class LogicalAnd(_Node):
    """Short-circuit ``left && right``."""

    node: Literal["and"] = "and"
    left: "Expression"
    right: "Expression"


class Invoke(_Node):
    """``target.method(arguments)``"""

    node: Literal["invoke"] = "invoke"
    target: "Expression"
    method: str
    arguments: tuple["Expression", ...] = ()


class New(_Node):
    """``new type(arguments)``"""

    node: Literal["new"] = "new"
    type: TypeReference
    arguments: tuple["Expression", ...] = ()


class TypeRefExpr(_Node):
    """A type used as an expression, e.g. the target of a static call."""

    node: Literal["type_ref"] = "type_ref"
    type: TypeReference


class ArrayLiteral(_Node):
    """An empty array of ``element_type``."""

    node: Literal["array"] = "array"
    element_type: TypeReference


class Constant(_Node):
    node: Literal["literal"] = "literal"
    value: Union[bool, int, float, str, None] = None


class Wrap(_Node):
    """Wrap a value in a reactive container (scalar or collection)."""

    node: Literal["wrap"] = "wrap"
    collection: bool = False
    value: "Expression"


Expression = Annotated[
    Union[
        ArgumentRef, VariableRef, ThisRef, FieldRef, LogicalAnd,
        Invoke, New, TypeRefExpr, ArrayLiteral, Constant, Wrap,
    ],
    ModelField(discriminator="node"),
]


# === Statements ===

class Assign(_Node):
    node: Literal["assign"] = "assign"
    target: Expression
    value: Expression


class VariableDeclaration(_Node):
    node: Literal["declare"] = "declare"
    name: str
    type: TypeReference
    value: Optional[Expression] = None


class ExpressionStatement(_Node):
    node: Literal["expression"] = "expression"
    expression: Expression


class If(_Node):
    node: Literal["if"] = "if"
    condition: Expression
    body: tuple["Statement", ...] = ()


class ForEach(_Node):
    node: Literal["for_each"] = "for_each"
    variable: str
    iterable: Expression
    body: tuple["Statement", ...] = ()


class Return(_Node):
    node: Literal["return"] = "return"
    value: Optional[Expression] = None


Statement = Annotated[
    Union[Assign, VariableDeclaration, ExpressionStatement, If, ForEach, Return],
    ModelField(discriminator="node"),
]


# === Members ===

class Parameter(_Node):
    name: str
    type: TypeReference


class Field(_Node):
    """Field member. Enum constants are fields whose ``init`` is the explicit value."""

    node: Literal["field"] = "field"
    name: str
    type: Optional[TypeReference] = None
    init: Optional[Expression] = None
    is_static: bool = False


class Method(_Node):
    node: Literal["method"] = "method"
    name: str
    type_parameters: tuple[str, ...] = ()
    return_type: Optional[TypeReference] = None
    parameters: tuple[Parameter, ...] = ()
    body: tuple[Statement, ...] = ()
    is_static: bool = False


class Constructor(_Node):
    node: Literal["constructor"] = "constructor"
    parameters: tuple[Parameter, ...] = ()
    base_arguments: tuple[Expression, ...] = ()
    body: tuple[Statement, ...] = ()


Member = Annotated[Union[Field, Method, Constructor], ModelField(discriminator="node")]


# === Declarations ===

class InterfaceDeclaration(_Node):
    node: Literal["interface"] = "interface"
    name: str
    type_parameters: tuple[str, ...] = ()
    base_type: Optional[TypeReference] = None
    members: tuple[Member, ...] = ()


class ClassDeclaration(_Node):
    node: Literal["class"] = "class"
    name: str
    type_parameters: tuple[str, ...] = ()
    base_type: Optional[TypeReference] = None
    members: tuple[Member, ...] = ()

    @property
    def constructor(self) -> Optional[Constructor]:
        for member in self.members:
            if isinstance(member, Constructor):
                return member
        return None


class EnumDeclaration(_Node):
    node: Literal["enum"] = "enum"
    name: str
    members: tuple[Field, ...] = ()


Declaration = Annotated[
    Union[InterfaceDeclaration, ClassDeclaration, EnumDeclaration],
    ModelField(discriminator="node"),
]


class Namespace(_Node):
    name: str
    declarations: tuple[Declaration, ...] = ()


class CompileUnit(_Node):
    """Root of a declaration graph: namespaces in emission order."""

    namespaces: tuple[Namespace, ...] = ()

    def find(self, namespace: str, name: str) -> Optional[Any]:
        """Look up a declaration by namespace and declared name."""
        for ns in self.namespaces:
            if ns.name != namespace:
                continue
            for declaration in ns.declarations:
                if declaration.name == name:
                    return declaration
        return None


for _model in (
    TypeReference, FieldRef, LogicalAnd, Invoke, New, Wrap,
    Assign, VariableDeclaration, ExpressionStatement, If, ForEach, Return,
    Field, Method, Constructor,
    InterfaceDeclaration, ClassDeclaration, EnumDeclaration, Namespace, CompileUnit,
):
    _model.model_rebuild()
