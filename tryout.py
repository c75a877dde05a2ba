from vmcalc.compiler import compile_expression
from vmcalc.diagnostics import Diagnostic
from vmcalc.lexer import TokenStream, tokenize
from vmcalc.parser import parse
from vmcalc.vm import Vm

for code in [
    "5",
    "-1",
    "1 + 1",
    "-1 + 1",
    "1 + -1",
    "4 + 6 * 3",
    "(4 + 6)",
    "(4+6) * 3",
    "80225/+2",
    "7/6/2000",
    "20 % 10",
    "-7 % 3",
    "10 / 5/ 2",
    "5 / 0",
    "(1 + 2",
    "1 + $x",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    print(f"tokens: {' '.join(str(t) for t in tokenize(code))}")

    try:
        tree = parse(code, TokenStream(tokenize(code)))
    except Diagnostic as e:
        print(e)
        continue
    print(f"ast: {tree}")

    chunk = compile_expression(tree)
    print(f"chunk:\n{chunk.disassemble()}")

    try:
        result = Vm(code, chunk).execute()
    except Diagnostic as e:
        print(e)
        continue
    print(f"result: {result}")
