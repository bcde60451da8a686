"""Prompts for adaptive scenario generation.

- scenario_prompts.py: composable sections for the scenario generation prompt
"""
