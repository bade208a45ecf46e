"""Scheduler and run-time environment configuration."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import FrozenSet

_INCLUDED_FUNCTIONS = frozenset(
    {
        "xEventGroupSetBitsFromISR",
        "xSemaphoreGetMutexHolder",
        "vTaskDelay",
        "vTaskDelayUntil",
        "vTaskDelete",
        "xTaskGetCurrentTaskHandle",
        "xTaskGetSchedulerState",
        "uxTaskGetStackHighWaterMark",
        "uxTaskPriorityGet",
        "vTaskPrioritySet",
        "eTaskGetState",
        "vTaskSuspend",
        "xTimerPendFunctionCall",
    }
)

_RTE_COMPONENTS = frozenset(
    {
        "CMSIS_RTOS2",
        "CMSIS_RTOS2_FreeRTOS",
        "RTOS_FreeRTOS_CONFIG_RTOS2",
        "RTOS_FreeRTOS_CORE",
        "RTOS_FreeRTOS_COROUTINE",
        "RTOS_FreeRTOS_EVENTGROUPS",
        "RTOS_FreeRTOS_HEAP_4",
        "RTOS_FreeRTOS_MESSAGE_BUFFER",
        "RTOS_FreeRTOS_STREAM_BUFFER",
        "RTOS_FreeRTOS_TIMERS",
    }
)


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be in {low}..{high}, got {value}")


@dataclass(frozen=True)
class RTOSConfig:
    """Kernel configuration values."""

    minimal_stack_size: int = 128
    total_heap_size: int = 15 * 1024
    tick_rate_hz: int = 1000
    timer_task_stack_depth: int = 80
    timer_task_priority: int = 40
    timer_queue_length: int = 5
    max_syscall_interrupt_priority: int = 16
    use_time_slicing: bool = True
    idle_should_yield: bool = True
    check_for_stack_overflow: int = 0
    use_idle_hook: bool = False
    use_tick_hook: bool = False
    use_daemon_task_startup_hook: bool = False
    use_malloc_failed_hook: bool = False
    queue_registry_size: int = 0
    use_newlib_reentrant: bool = True
    linker_heap_base_symbol: str = "__HeapBase"
    linker_heap_limit_symbol: str = "__HeapLimit"
    linker_heap_size_symbol: str = "_Min_Heap_Size"
    support_static_allocation: bool = True
    support_dynamic_allocation: bool = True
    use_preemption: bool = True
    use_timers: bool = True
    use_mutexes: bool = True
    use_recursive_mutexes: bool = True
    use_counting_semaphores: bool = True
    use_task_notifications: bool = True
    use_trace_facility: bool = True
    use_16_bit_ticks: bool = False
    use_port_optimised_task_selection: bool = False
    max_priorities: int = 56
    kernel_interrupt_priority: int = 255
    included_functions: FrozenSet[str] = field(default=_INCLUDED_FUNCTIONS)

    def __post_init__(self) -> None:
        _check_range("minimal_stack_size", self.minimal_stack_size, 0, 0xFFFF)
        _check_range("total_heap_size", self.total_heap_size, 0, 0xFFFFFFFF)
        _check_range("tick_rate_hz", self.tick_rate_hz, 1, 0xFFFFFFFF)
        _check_range("timer_task_stack_depth", self.timer_task_stack_depth, 0, 0xFFFF)
        _check_range("timer_task_priority", self.timer_task_priority, 0, 56)
        _check_range("timer_queue_length", self.timer_queue_length, 0, 1024)
        _check_range("check_for_stack_overflow", self.check_for_stack_overflow, 0, 2)
        if self.max_syscall_interrupt_priority == 0:
            raise ValueError("max_syscall_interrupt_priority must not be 0")

    def ms_to_ticks(self, ms: int) -> int:
        """Convert milliseconds to kernel ticks, rounding down."""
        if ms < 0:
            raise ValueError("milliseconds must not be negative")
        return ms * self.tick_rate_hz // 1000

    def with_overrides(self, **kwargs) -> "RTOSConfig":
        return dataclasses.replace(self, **kwargs)


@dataclass(frozen=True)
class RTEComponents:
    """Run-time environment components selected for the target."""

    device_header: str = "stm32f446xx.h"
    components: FrozenSet[str] = field(default=_RTE_COMPONENTS)

    def enabled(self, name: str) -> bool:
        if name.startswith("RTE_"):
            name = name[len("RTE_"):]
        return name in self.components