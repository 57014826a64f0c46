"""Box Score API: league box scores served read-through from a persistent store."""
