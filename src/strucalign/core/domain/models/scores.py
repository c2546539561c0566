"""Names under which alignment scores are cached."""

PROBABILITY = "Probability"
AVGTM_SCORE = "AvgTM-score"
CE_SCORE = "CE-score"
RMSD = "RMSD"

PAIRWISE_SCORES = (PROBABILITY, AVGTM_SCORE, CE_SCORE, RMSD)
