"""
Trainable classifier engines

The windowing pipeline treats the classifier as a black box with
fit / predict. Every engine here:

- flattens (n, lookback, features) inputs to (n, lookback * features)
- trains by mini-batch partial_fit, in sample order
- honours a cooperative stop() flag between mini-batches
- returns probabilities of shape (n, entity_count * horizon_length)

Engines are resolved through registry.resolve_model_train_engine.
"""
