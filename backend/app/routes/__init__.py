# All routes live in v1/; health and Prometheus are mounted there without a version prefix
