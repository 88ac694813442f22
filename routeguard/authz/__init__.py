"""Authorization decisions: hierarchical matcher, decision engine, navigation gate."""
