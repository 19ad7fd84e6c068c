import ast, math, operator as op
from typing import Any, Dict, Optional

ALLOWED = {
    "abs": abs, "min": min, "max": max, "round": round,
    "sqrt": math.sqrt, "sin": math.sin, "cos": math.cos, "tan": math.tan,
    "atan2": math.atan2, "radians": math.radians, "degrees": math.degrees,
    "pi": math.pi, "tau": math.tau,
}
OPS = {
    ast.Add: op.add, ast.Sub: op.sub, ast.Mult: op.mul, ast.Div: op.truediv,
    ast.Pow: op.pow, ast.Mod: op.mod, ast.USub: op.neg, ast.UAdd: op.pos
}

def _eval(node, env):
    if isinstance(node, ast.Constant):
        if isinstance(node.value, (int, float)):
            return node.value
        raise ValueError(f"constant not allowed: {node.value!r}")
    if isinstance(node, ast.BinOp):
        if type(node.op) not in OPS:
            raise ValueError("operator not allowed")
        return OPS[type(node.op)](_eval(node.left, env), _eval(node.right, env))
    if isinstance(node, ast.UnaryOp):
        if type(node.op) not in OPS:
            raise ValueError("operator not allowed")
        return OPS[type(node.op)](_eval(node.operand, env))
    if isinstance(node, ast.Name):
        if node.id in env: return env[node.id]
        if node.id in ALLOWED: return ALLOWED[node.id]
        raise ValueError(f"name not allowed: {node.id}")
    if isinstance(node, ast.Call):
        func = _eval(node.func, env)
        if not callable(func):
            raise ValueError("call of a non-function")
        args = [_eval(a, env) for a in node.args]
        return func(*args)
    raise ValueError("bad expression")

def eval_expr(expr: str, env: Optional[Dict[str, Any]] = None) -> float:
    """Evaluate a numeric expression like ``pi/2`` or ``{3*sqrt(2)}``."""
    s = expr.strip()
    if s.startswith("{") and s.endswith("}"):
        s = s[1:-1]
    try:
        tree = ast.parse(s, mode="eval").body
    except SyntaxError as e:
        raise ValueError(f"bad expression: {expr!r}") from e
    return float(_eval(tree, env or {}))
