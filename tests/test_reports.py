"""Tests for project performance, capacity and task team reports."""

from decimal import Decimal

import pendulum

from factories import task_row, user_row
from tidemark.mapper.dispatch import map_record
from tidemark.model.entity_type import EntityType
from tidemark.service.allocation import task_team_metrics
from tidemark.service.capacity import (
    monthly_allocated_hours,
    resource_load,
    user_monthly_availability,
)
from tidemark.service.performance import portfolio_summary, project_performance

TODAY = pendulum.date(2024, 1, 20)


# ============================================================================
# Project performance
# ============================================================================


def test_project_performance(snapshot):
    performance = project_performance(snapshot, "10", TODAY)

    assert performance is not None
    assert performance["project_name"] == "ProjectX"
    assert performance["hours_logged"] == Decimal(10)
    assert performance["committed_cost"] == Decimal(800)
    assert performance["estimated_hours"] == Decimal(20)
    assert performance["progress"] == Decimal(50)
    # 10 remaining hours at Ana's 50/h
    assert performance["cost_to_finish"] == Decimal(500)
    assert performance["sold_value"] == Decimal(2000)
    assert performance["result"] == Decimal(1200)
    assert performance["margin"] == Decimal(60)
    assert performance["planned_progress"] is None


def test_project_performance_without_sales_has_zero_margin(snapshot):
    performance = project_performance(snapshot, "11", TODAY)

    assert performance["sold_value"] == Decimal(0)
    assert performance["margin"] == Decimal(0)


def test_project_performance_unknown_project(snapshot):
    assert project_performance(snapshot, "404", TODAY) is None


def test_cost_to_finish_uses_fallback_rate(loaded_store):
    loaded_store.apply_upsert(
        EntityType.USER, map_record(EntityType.USER, user_row(100, "Ana", 0))
    )

    performance = project_performance(loaded_store.snapshot(), "10", TODAY, Decimal(150))

    assert performance["cost_to_finish"] == Decimal(1500)


def test_portfolio_summary(snapshot):
    summary = portfolio_summary(snapshot, None, TODAY)

    assert summary["project_count"] == 2
    assert summary["active_project_count"] == 2
    assert summary["sold_value"] == Decimal(2000)
    assert summary["committed_cost"] == Decimal(900)
    assert summary["cost_to_finish"] == Decimal(500)
    assert summary["estimated_result"] == Decimal(600)
    assert summary["global_progress"] == Decimal(25)
    assert summary["delayed_task_count"] == 0


def test_portfolio_summary_of_nothing(snapshot):
    summary = portfolio_summary(snapshot, [], TODAY)

    assert summary["project_count"] == 0
    assert summary["global_progress"] == Decimal(0)


# ============================================================================
# Capacity
# ============================================================================


def _task(**extra):
    return map_record(EntityType.TASK, task_row(**extra))


def test_allocated_hours_spread_over_days_and_assignees():
    task = _task(
        developer_id=100,
        collaborator_ids="101",
        horas_estimadas=40,
        inicio_previsto="2024-01-25",
        entrega_estimada="2024-02-03",
    )

    # 10 planned days, 20h per assignee: 7 days fall in January, 3 in February
    assert monthly_allocated_hours("100", "2024-01", [task], TODAY) == Decimal(14)
    assert monthly_allocated_hours("101", "2024-02", [task], TODAY) == Decimal(6)
    assert monthly_allocated_hours("102", "2024-01", [task], TODAY) == Decimal(0)


def test_allocated_hours_skip_done_tasks():
    task = _task(StatusTarefa="Concluído", horas_estimadas=40, inicio_previsto="2024-01-02")

    assert monthly_allocated_hours("100", "2024-01", [task], TODAY) == Decimal(0)


def test_undated_task_occupies_today():
    task = _task(horas_estimadas=8)

    assert monthly_allocated_hours("100", "2024-01", [task], TODAY) == Decimal(8)
    assert monthly_allocated_hours("100", "2024-02", [task], TODAY) == Decimal(0)


def test_user_monthly_availability():
    user = map_record(EntityType.USER, user_row(100))
    task = _task(horas_estimadas=8)

    availability = user_monthly_availability(user, "2024-01", [task], TODAY)

    assert availability["capacity"] == Decimal(160)
    assert availability["allocated"] == Decimal(8)
    assert availability["available"] == Decimal(152)


def test_resource_load(snapshot):
    loads = resource_load(snapshot, "2024-01")

    # Bruno has 120h of capacity, Ana the default 160h
    assert [load["user_name"] for load in loads] == ["Bruno", "Ana"]
    assert loads[0]["logged"] == Decimal(6)
    assert loads[0]["load"] == Decimal(5)
    assert loads[1]["capacity"] == Decimal(160)
    assert loads[1]["load"] == Decimal("3.75")


def test_resource_load_skips_inactive_users(loaded_store):
    loaded_store.apply_upsert(
        EntityType.USER, map_record(EntityType.USER, user_row(101, "Bruno", ativo=False))
    )

    loads = resource_load(loaded_store.snapshot(), "2024-01")

    assert [load["user_id"] for load in loads] == ["100"]


# ============================================================================
# Task team
# ============================================================================


def test_task_team_metrics(snapshot):
    metrics = task_team_metrics(snapshot, "1000")

    assert [m["user_name"] for m in metrics] == ["Ana", "Bruno"]
    ana, bruno = metrics
    assert ana["is_responsible"] is True
    assert ana["limit"] == Decimal(10)
    assert ana["spent"] == Decimal(4)
    assert ana["remaining"] == Decimal(6)
    assert ana["usage"] == Decimal(40)
    assert bruno["is_responsible"] is False
    assert bruno["remaining"] == Decimal(4)
    assert bruno["usage"] == Decimal(60)


def test_task_team_metrics_without_membership(snapshot):
    metrics = task_team_metrics(snapshot, "1001")

    assert len(metrics) == 1
    assert metrics[0]["limit"] == Decimal(0)
    assert metrics[0]["usage"] == Decimal(0)


def test_task_team_metrics_unknown_task(snapshot):
    assert task_team_metrics(snapshot, "404") is None
