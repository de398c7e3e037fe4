"""Syntax tree nodes of SQL statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class JoinType(IntEnum):
    INNER_JOIN = 0
    LEFT_JOIN = 1
    RIGHT_JOIN = 2
    FULL_JOIN = 3


class SvType(IntEnum):
    INT = 0
    FLOAT = 1
    STRING = 2


class SvCompOp(IntEnum):
    EQ = 0
    NE = 1
    LT = 2
    GT = 3
    LE = 4
    GE = 5


class OrderByDir(IntEnum):
    DEFAULT = 0
    ASC = 1
    DESC = 2


@dataclass
class TreeNode:
    """Base of every syntax tree node."""


@dataclass
class Help(TreeNode):
    pass


@dataclass
class ShowTables(TreeNode):
    pass


@dataclass
class TxnBegin(TreeNode):
    pass


@dataclass
class TxnCommit(TreeNode):
    pass


@dataclass
class TxnAbort(TreeNode):
    pass


@dataclass
class TxnRollback(TreeNode):
    pass


@dataclass
class TypeLen(TreeNode):
    type: SvType
    len: int


@dataclass
class Field(TreeNode):
    """Base of the entries of a table definition."""


@dataclass
class ColDef(Field):
    col_name: str
    type_len: TypeLen


@dataclass
class CreateTable(TreeNode):
    tab_name: str
    fields: list[Field]


@dataclass
class DropTable(TreeNode):
    tab_name: str


@dataclass
class DescTable(TreeNode):
    tab_name: str


@dataclass
class CreateIndex(TreeNode):
    tab_name: str
    col_names: list[str]


@dataclass
class DropIndex(TreeNode):
    tab_name: str
    col_names: list[str]


@dataclass
class Expr(TreeNode):
    """Base of expressions."""


@dataclass
class Value(Expr):
    """Base of literal values."""


@dataclass
class IntLit(Value):
    val: int


@dataclass
class FloatLit(Value):
    val: float


@dataclass
class StringLit(Value):
    val: str


@dataclass
class Col(Expr):
    tab_name: str
    col_name: str


@dataclass
class SetClause(TreeNode):
    col_name: str
    val: Value


@dataclass
class BinaryExpr(TreeNode):
    lhs: Col
    op: SvCompOp
    rhs: Expr


@dataclass
class OrderBy(TreeNode):
    cols: Col
    orderby_dir: OrderByDir


@dataclass
class InsertStmt(TreeNode):
    tab_name: str
    vals: list[Value]


@dataclass
class DeleteStmt(TreeNode):
    tab_name: str
    conds: list[BinaryExpr]


@dataclass
class UpdateStmt(TreeNode):
    tab_name: str
    set_clauses: list[SetClause]
    conds: list[BinaryExpr]


@dataclass
class JoinExpr(TreeNode):
    left: str
    right: str
    conds: list[BinaryExpr]
    type: JoinType


@dataclass
class SelectStmt(TreeNode):
    cols: list[Col]
    tabs: list[str]
    conds: list[BinaryExpr]
    order: OrderBy | None = None
    jointree: list[JoinExpr] = field(default_factory=list)

    @property
    def has_sort(self) -> bool:
        """Whether the statement has an ORDER BY clause."""
        return self.order is not None