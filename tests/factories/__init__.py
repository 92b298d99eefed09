"""
Test data factories.

Builders for categories, questions and question batches, plus an in-memory
trivia source so game tests never touch the network.
"""
