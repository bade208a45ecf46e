import dataclasses

import pytest

from robotctl.rtos_config import RTEComponents, RTOSConfig


def test_defaults_from_configuration():
    cfg = RTOSConfig()
    assert cfg.total_heap_size == 15 * 1024
    assert cfg.tick_rate_hz == 1000
    assert cfg.max_priorities == 56
    assert cfg.use_newlib_reentrant is True
    assert cfg.linker_heap_base_symbol == "__HeapBase"


def test_ms_to_ticks_at_one_kilohertz():
    assert RTOSConfig().ms_to_ticks(10) == 10


def test_ms_to_ticks_with_slower_tick():
    cfg = RTOSConfig().with_overrides(tick_rate_hz=100)
    assert cfg.ms_to_ticks(1000) == 100
    assert cfg.ms_to_ticks(5) == 0


def test_ms_to_ticks_rejects_negative():
    with pytest.raises(ValueError):
        RTOSConfig().ms_to_ticks(-1)


def test_with_overrides_keeps_original():
    cfg = RTOSConfig()
    other = cfg.with_overrides(timer_queue_length=8)
    assert other.timer_queue_length == 8
    assert cfg.timer_queue_length == 5


def test_override_out_of_range():
    with pytest.raises(ValueError):
        RTOSConfig().with_overrides(timer_task_priority=57)
    with pytest.raises(ValueError):
        RTOSConfig().with_overrides(check_for_stack_overflow=3)


def test_zero_syscall_priority_rejected():
    with pytest.raises(ValueError):
        RTOSConfig(max_syscall_interrupt_priority=0)


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        RTOSConfig().with_overrides(no_such_option=1)


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        RTOSConfig().tick_rate_hz = 10


def test_included_functions():
    assert "vTaskDelay" in RTOSConfig().included_functions


def test_rte_components():
    rte = RTEComponents()
    assert rte.device_header == "stm32f446xx.h"
    assert rte.enabled("RTOS_FreeRTOS_HEAP_4") is True
    assert rte.enabled("RTE_RTOS_FreeRTOS_TIMERS") is True
    assert rte.enabled("RTOS_FreeRTOS_HEAP_1") is False