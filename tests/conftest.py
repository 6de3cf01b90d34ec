from __future__ import annotations

import random

import pytest

from simulation import ElevatorControlService, EntityFactory, SystemConfig


@pytest.fixture
def config() -> SystemConfig:
    return SystemConfig(num_floors=10, car_count=4, random_seed=1234)


@pytest.fixture
def service(config: SystemConfig) -> ElevatorControlService:
    return ElevatorControlService(config)


@pytest.fixture
def single_car_service() -> ElevatorControlService:
    return ElevatorControlService(SystemConfig(num_floors=10, car_count=1, random_seed=99))


@pytest.fixture
def factory() -> EntityFactory:
    return EntityFactory(10, random_state=random.Random(42), clock=lambda: 0.0)
