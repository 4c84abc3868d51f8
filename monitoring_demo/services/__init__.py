"""Run guard, loop budgets and the exercise runner"""
