"""GitHub integration - run deployment risk assessment inside Actions.

Reads the action inputs, scores the pull request and publishes:
  - Step outputs (risk-score, risk-level, recommendation, analysis)
  - Job summary with the factor breakdown
  - Optional PR comment
"""
