# tomasim

A small cycle-stepped simulator of an out-of-order RV32I core in the style of
Tomasulo's algorithm. It has these parts:

- an instruction cache that prefetches words from memory in batches of eight,
  with a three-cycle latency,
- a reorder buffer,
- six reservation stations: two for loads/stores, two for arithmetic, two for
  branches and jumps,
- a register file with renaming status,
- a common data bus that broadcasts up to two results per cycle,
- a load/store queue of delayed memory accesses.

## Installing

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Running a program

The `tomasim` command reads a program from standard input in hex memory-image
form. `@` followed by eight hex digits sets the load address. After it come
32-bit words, each written as eight hex digits holding the bytes in
little-endian order. All whitespace is ignored.

```
tomasim < program.data
```

The processor is clocked until no unit has work left, and the number of
cycles is printed. The command takes no options besides `--help`.

## Using it from Python

```python
from tomasim.memory import Memory
from tomasim.cpu import Processor
from tomasim.decoder import decode

memory = Memory()
memory.load("@00000000\n93 00 50 00\n")

print(decode(memory.read(0), 0).show())   # 00500093            addi ra zero 5

cpu = Processor(memory, max_cycles=10_000)
cycles = cpu.run()
print(cycles, cpu.registers.read(1))
```

`Processor.step()` runs one clock cycle and returns whether any unit still has
work. `Processor.run()` steps until idle and returns the cycle count. With
`max_cycles` set, it raises `RuntimeError` once that many cycles have gone by
and work remains.

The modules follow the pipeline units:

| module | contents |
| --- | --- |
| `tomasim.decoder` | `decode`, `Instruction` (with `show()`), `register_name` |
| `tomasim.memory` | `Memory` (`read`, `write`, `load`, `dump`), `TickerMem`, `parse_word` |
| `tomasim.entry` | `RobEntry`, `State` |
| `tomasim.alu` | `calculate` |
| `tomasim.registers` | `RegisterFile`, `RegisterStatus`, `Operands`, `OperandSource`, `read_operands`, `write_back` |
| `tomasim.stations` | `ReservationStations` |
| `tomasim.cdb` | `CommonDataBus` |
| `tomasim.inst_cache` | `InstructionCache`, `CacheStatus` |
| `tomasim.lsb` | `LoadStoreQueue`, `LoadStoreEntry`, `MemoryOp` |
| `tomasim.rob` | `ReorderBuffer` |
| `tomasim.cpu` | `Processor`, `main` |

A `TickerMem` access completes on its third attempt. The instruction cache
treats a zero word as the end of the program.

## What it does not do

The simulator does not run general programs to completion:

- Only arithmetic instructions (register-register and immediate forms) commit
  and write the register file. Loads, stores, branches and jumps are issued and
  computed, but never retire. A program that holds them stays busy forever, so
  pass `max_cycles` to `Processor` to stop it with a `RuntimeError`.
- The reorder buffer never feeds the load/store queue, so no instruction reads
  or writes data memory.
- Branches and jumps do not redirect fetching. There is no branch prediction.
- A word that does not decode to a known operation stays undecoded, which also
  keeps the processor busy.
- `calculate` raises `ValueError` for an operation it does not know.
- The program's output and final register state are not printed; the command
  prints only the cycle count.