import io

import pytest

from rmdb.ast import (
    BinaryExpr,
    Col,
    ColDef,
    CreateIndex,
    CreateTable,
    DeleteStmt,
    Expr,
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
    TxnBegin,
    TxnRollback,
    TypeLen,
    UpdateStmt,
)
from rmdb.ast_printer import format_tree, print_tree


def test_help():
    assert format_tree(Help()) == "HELP\n"


def test_show_tables():
    assert format_tree(ShowTables()) == "SHOW_TABLES\n"


@pytest.mark.parametrize(
    "node, head",
    [(TxnBegin(), "BEGIN"), (TxnRollback(), "ROLLBACK")],
)
def test_transaction_nodes(node, head):
    assert format_tree(node) == head + "\n"


def test_create_table_layout():
    node = CreateTable("tb", [ColDef("a", TypeLen(SvType.INT, 4))])
    lines = format_tree(node).splitlines()
    assert lines[0] == "CREATE_TABLE"
    assert lines[1] == "  tb"
    assert lines[2] == "  LIST"
    assert lines[3] == "    COL_DEF"
    assert lines[4] == "      a"
    assert lines[5] == "      TYPE_LEN"
    assert lines[6] == "        INT"
    assert lines[7] == "        4"


def test_create_index_lists_columns_at_same_depth():
    lines = format_tree(CreateIndex("tb", ["a", "b", "c"])).splitlines()
    assert lines == ["CREATE_INDEX", "  tb", "  a", "  b", "  c"]


def test_insert_values():
    node = InsertStmt("tb", [IntLit(1), FloatLit(3.14), StringLit("pi")])
    lines = format_tree(node).splitlines()
    assert lines[0] == "INSERT"
    assert "    INT_LIT" in lines
    assert "      1" in lines
    assert "      3.14" in lines
    assert "      pi" in lines


def test_binary_expr_operator_names():
    cond = BinaryExpr(Col("", "x"), SvCompOp.NE, IntLit(2))
    lines = format_tree(DeleteStmt("tb", [cond])).splitlines()
    assert "      !=" in lines
    cond = BinaryExpr(Col("", "y"), SvCompOp.GE, FloatLit(3.0))
    assert "      >=" in format_tree(DeleteStmt("tb", [cond])).splitlines()


def test_update_has_two_lists():
    node = UpdateStmt(
        "tb",
        [SetClause("a", IntLit(1))],
        [BinaryExpr(Col("", "x"), SvCompOp.EQ, IntLit(2))],
    )
    lines = format_tree(node).splitlines()
    assert lines.count("  LIST") == 2
    assert "    SET_CLAUSE" in lines
    assert "    BINARY_EXPR" in lines


def test_select_prints_tables_as_values():
    node = SelectStmt([Col("x", "a")], ["x", "y"], [])
    lines = format_tree(node).splitlines()
    assert lines[0] == "SELECT"
    assert lines.count("  LIST") == 3
    assert "    x" in lines
    assert "    y" in lines
    assert "    COL" in lines


def test_indentation_never_decreases_below_zero_and_steps_by_two():
    node = SelectStmt(
        [Col("x", "a")],
        ["x"],
        [BinaryExpr(Col("x", "a"), SvCompOp.LT, Col("tb", "a"))],
    )
    for line in format_tree(node).splitlines():
        indent = len(line) - len(line.lstrip(" "))
        assert indent % 2 == 0


def test_print_tree_writes_same_text():
    node = CreateIndex("tb", ["a"])
    out = io.StringIO()
    print_tree(node, out)
    assert out.getvalue() == format_tree(node)


def test_unknown_node_rejected():
    with pytest.raises(TypeError):
        format_tree(Expr())