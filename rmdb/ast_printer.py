"""Indented text rendering of syntax trees."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from .ast import (
    BinaryExpr,
    Col,
    ColDef,
    CreateIndex,
    CreateTable,
    DeleteStmt,
    DescTable,
    DropIndex,
    DropTable,
    FloatLit,
    Help,
    InsertStmt,
    IntLit,
    SelectStmt,
    SetClause,
    ShowTables,
    StringLit,
    SvCompOp,
    SvType,
    TreeNode,
    TxnAbort,
    TxnBegin,
    TxnCommit,
    TxnRollback,
    TypeLen,
    UpdateStmt,
)

_TYPE_NAMES = {
    SvType.INT: "INT",
    SvType.FLOAT: "FLOAT",
    SvType.STRING: "STRING",
}

_OP_NAMES = {
    SvCompOp.EQ: "==",
    SvCompOp.NE: "!=",
    SvCompOp.LT: "<",
    SvCompOp.GT: ">",
    SvCompOp.LE: "<=",
    SvCompOp.GE: ">=",
}


def _format_value(val: object) -> str:
    if isinstance(val, float):
        return f"{val:g}"
    return str(val)


class _Printer:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def val(self, val: object, offset: int) -> None:
        self.lines.append(" " * offset + _format_value(val))

    def val_list(self, vals: Iterable[object], offset: int) -> None:
        self.lines.append(" " * offset + "LIST")
        for val in vals:
            self.val(val, offset + 2)

    def node_list(self, nodes: Iterable[TreeNode], offset: int) -> None:
        self.lines.append(" " * offset + "LIST")
        for node in nodes:
            self.node(node, offset + 2)

    def head(self, name: str, offset: int) -> None:
        self.lines.append(" " * offset + name)

    def node(self, node: TreeNode, offset: int) -> None:
        inner = offset + 2
        match node:
            case Help():
                self.head("HELP", offset)
            case ShowTables():
                self.head("SHOW_TABLES", offset)
            case CreateTable():
                self.head("CREATE_TABLE", offset)
                self.val(node.tab_name, inner)
                self.node_list(node.fields, inner)
            case DropTable():
                self.head("DROP_TABLE", offset)
                self.val(node.tab_name, inner)
            case DescTable():
                self.head("DESC_TABLE", offset)
                self.val(node.tab_name, inner)
            case CreateIndex():
                self.head("CREATE_INDEX", offset)
                self.val(node.tab_name, inner)
                for col_name in node.col_names:
                    self.val(col_name, inner)
            case DropIndex():
                self.head("DROP_INDEX", offset)
                self.val(node.tab_name, inner)
                for col_name in node.col_names:
                    self.val(col_name, inner)
            case ColDef():
                self.head("COL_DEF", offset)
                self.val(node.col_name, inner)
                self.node(node.type_len, inner)
            case Col():
                self.head("COL", offset)
                self.val(node.tab_name, inner)
                self.val(node.col_name, inner)
            case TypeLen():
                self.head("TYPE_LEN", offset)
                self.val(_TYPE_NAMES[SvType(node.type)], inner)
                self.val(node.len, inner)
            case IntLit():
                self.head("INT_LIT", offset)
                self.val(node.val, inner)
            case FloatLit():
                self.head("FLOAT_LIT", offset)
                self.val(float(node.val), inner)
            case StringLit():
                self.head("STRING_LIT", offset)
                self.val(node.val, inner)
            case SetClause():
                self.head("SET_CLAUSE", offset)
                self.val(node.col_name, inner)
                self.node(node.val, inner)
            case BinaryExpr():
                self.head("BINARY_EXPR", offset)
                self.node(node.lhs, inner)
                self.val(_OP_NAMES[SvCompOp(node.op)], inner)
                self.node(node.rhs, inner)
            case InsertStmt():
                self.head("INSERT", offset)
                self.val(node.tab_name, inner)
                self.node_list(node.vals, inner)
            case DeleteStmt():
                self.head("DELETE", offset)
                self.val(node.tab_name, inner)
                self.node_list(node.conds, inner)
            case UpdateStmt():
                self.head("UPDATE", offset)
                self.val(node.tab_name, inner)
                self.node_list(node.set_clauses, inner)
                self.node_list(node.conds, inner)
            case SelectStmt():
                self.head("SELECT", offset)
                self.node_list(node.cols, inner)
                self.val_list(node.tabs, inner)
                self.node_list(node.conds, inner)
            case TxnBegin():
                self.head("BEGIN", offset)
            case TxnCommit():
                self.head("COMMIT", offset)
            case TxnAbort():
                self.head("ABORT", offset)
            case TxnRollback():
                self.head("ROLLBACK", offset)
            case _:
                raise TypeError(f"cannot print node of type {type(node).__name__}")


def format_tree(node: TreeNode) -> str:
    """The tree as indented text, one item per line, ending with a newline."""
    printer = _Printer()
    printer.node(node, 0)
    return "".join(line + "\n" for line in printer.lines)


def print_tree(node: TreeNode, file: TextIO | None = None) -> None:
    """Write the tree as indented text to file, standard output by default."""
    out = file if file is not None else sys.stdout
    out.write(format_tree(node))