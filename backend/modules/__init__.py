"""
Feature modules for the AirMode backend.

- auth: session tokens, Huawei login and the user directory
- airports: airport reference data and proximity search
- flights: the flight record lifecycle

Each module exposes Protocol interfaces and wires its concrete classes
through api.dependencies.
"""
