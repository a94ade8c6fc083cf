"""SQL commands used by rate limiting package."""

CREATE_RATE_LIMITS_TABLE = """
    CREATE TABLE IF NOT EXISTS rate_limits (
        policy          text NOT NULL,
        subject         text NOT NULL,
        window_start    bigint NOT NULL,
        hits            int NOT NULL,
        PRIMARY KEY(policy, subject, window_start)
    );
    """


INCREMENT_HITS_PG = """
    INSERT INTO rate_limits (policy, subject, window_start, hits)
    VALUES (%s, %s, %s, 1)
    ON CONFLICT (policy, subject, window_start)
    DO UPDATE SET hits = rate_limits.hits + 1
    RETURNING hits
    """


INCREMENT_HITS_SQLITE = """
    INSERT INTO rate_limits (policy, subject, window_start, hits)
    VALUES (?, ?, ?, 1)
    ON CONFLICT (policy, subject, window_start)
    DO UPDATE SET hits = rate_limits.hits + 1
    RETURNING hits
    """


SELECT_HITS_PG = """
    SELECT hits
      FROM rate_limits
     WHERE policy=%s AND subject=%s AND window_start=%s
    """


SELECT_HITS_SQLITE = """
    SELECT hits
      FROM rate_limits
     WHERE policy=? AND subject=? AND window_start=?
    """


DELETE_OLD_WINDOWS_PG = """
    DELETE FROM rate_limits
     WHERE policy=%s AND subject=%s AND window_start < %s
    """


DELETE_OLD_WINDOWS_SQLITE = """
    DELETE FROM rate_limits
     WHERE policy=? AND subject=? AND window_start < ?
    """


DELETE_SUBJECT_PG = """
    DELETE FROM rate_limits
     WHERE policy=%s AND subject=%s
    """


DELETE_SUBJECT_SQLITE = """
    DELETE FROM rate_limits
     WHERE policy=? AND subject=?
    """
