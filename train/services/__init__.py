"""Application services for the train CLI.

Services implement the release workflows, coordinating between the core
types (core/, release/) and infrastructure (git/, platform/).
"""
