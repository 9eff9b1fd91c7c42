"""Routing: pattern matching, route tables, and mountable groups.

Routes are registered during setup into three method-keyed tables
(before middleware, main routes, after middleware) and matched in
registration order at dispatch time.
"""
