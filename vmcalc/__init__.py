from vmcalc.compiler import Chunk, OpCode, compile
from vmcalc.diagnostics import Diagnostic
from vmcalc.vm import Vm, evaluate, execute

__all__ = ["Chunk", "Diagnostic", "OpCode", "Vm", "compile", "evaluate", "execute"]
