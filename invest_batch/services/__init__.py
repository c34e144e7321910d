"""invest_batch.services -- the profit distribution run."""
