"""Processor port layer: initial task frames, priorities and critical sections."""

from __future__ import annotations

from typing import Dict, Tuple

WORD_SIZE = 4
_WORD_MASK = 0xFFFFFFFF

INITIAL_XPSR = 0x01000000
INITIAL_EXC_RETURN = 0xFFFFFFFD
START_ADDRESS_MASK = 0xFFFFFFFE

CORTEX_M7_R0P1_ID = 0x410FC271
CORTEX_M7_R0P0_ID = 0x410FC270

FIRST_USER_INTERRUPT_NUMBER = 16
MAX_PRIGROUP_BITS = 7
TOP_BIT_OF_BYTE = 0x80
PRIORITY_GROUP_MASK = 0x07 << 8
PRIGROUP_SHIFT = 8
VECTACTIVE_MASK = 0xFF


class PortError(RuntimeError):
    """Raised when a port-level consistency check fails."""


def initialise_stack(
    top_of_stack: int,
    code_address: int,
    parameters: int,
    return_address: int = 0,
) -> Tuple[int, Dict[int, int]]:
    """Lay out the frame a context switch expects for a new task.

    Addresses are byte addresses of 32-bit words.  Returns the new top of
    stack and the words written, keyed by address.
    """
    words: Dict[int, int] = {}
    top = top_of_stack - WORD_SIZE
    words[top] = INITIAL_XPSR
    top -= WORD_SIZE
    words[top] = code_address & START_ADDRESS_MASK
    top -= WORD_SIZE
    words[top] = return_address & _WORD_MASK
    top -= 5 * WORD_SIZE  # R12, R3, R2, R1 left uninitialised
    words[top] = parameters & _WORD_MASK
    top -= WORD_SIZE
    words[top] = INITIAL_EXC_RETURN
    top -= 8 * WORD_SIZE  # R11..R4
    return top, words


def check_cpuid(cpuid: int) -> None:
    """Reject core revisions this port cannot run on."""
    if cpuid in (CORTEX_M7_R0P1_ID, CORTEX_M7_R0P0_ID):
        raise PortError(f"core revision {cpuid:#010x} needs the r0p1 port")


def priority_grouping(priority_register_value: int, max_syscall_priority: int) -> Tuple[int, int]:
    """Derive the masked syscall priority and the maximum PRIGROUP field.

    ``priority_register_value`` is what reads back from a priority register
    after all its bits were written with ones.
    """
    if max_syscall_priority == 0:
        raise PortError("max syscall interrupt priority must not be 0")
    value = priority_register_value & 0xFF
    masked_syscall = max_syscall_priority & value
    prigroup = MAX_PRIGROUP_BITS
    while value & TOP_BIT_OF_BYTE:
        prigroup = (prigroup - 1) & _WORD_MASK
        value = (value << 1) & 0xFF
    prigroup = (prigroup << PRIGROUP_SHIFT) & PRIORITY_GROUP_MASK
    return masked_syscall, prigroup


def validate_interrupt_priority(
    interrupt_number: int,
    priority: int,
    max_syscall_priority: int,
    aircr: int,
    max_prigroup: int,
) -> None:
    """Check an interrupt may call the interrupt-safe scheduler API."""
    if interrupt_number >= FIRST_USER_INTERRUPT_NUMBER and priority < max_syscall_priority:
        raise PortError(
            f"interrupt {interrupt_number} has priority {priority} above "
            f"the syscall limit {max_syscall_priority}"
        )
    if (aircr & PRIORITY_GROUP_MASK) > max_prigroup:
        raise PortError("priority bits must all be pre-emption priority bits")


class CriticalSection:
    """Nesting counter that masks interrupts while any section is open."""

    def __init__(self) -> None:
        self.nesting = 0
        self._interrupts_enabled = True

    def enter(self, active_vector: int = 0) -> None:
        """Open a section; the outermost one must not be entered from an interrupt."""
        if self.nesting == 0 and active_vector & VECTACTIVE_MASK:
            raise PortError("critical section entered from an interrupt handler")
        self._interrupts_enabled = False
        self.nesting += 1

    def exit(self) -> None:
        if self.nesting == 0:
            raise PortError("critical section exited more often than entered")
        self.nesting -= 1
        if self.nesting == 0:
            self._interrupts_enabled = True

    def interrupts_enabled(self) -> bool:
        return self._interrupts_enabled

    def __enter__(self) -> "CriticalSection":
        self.enter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exit()