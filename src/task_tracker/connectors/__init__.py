"""Console connector and the transports it uses to reach the task engine."""
