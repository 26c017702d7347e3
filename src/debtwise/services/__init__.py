"""Payoff engine services.

Submodules are imported explicitly (``from debtwise.services import debts``);
the models package depends on :mod:`money`, so nothing is re-exported here.
"""
