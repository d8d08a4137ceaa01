"""
European option pricing: market inputs, payoffs, analytical and Monte Carlo pricers.
"""
