"""Read-only catalog and statistics queries run by the probes.

Every selected column is cast to a JSON-friendly type (text, bigint or
float8) so probe rows can be stored without further conversion.
"""

CONNECTION_COUNT_SQL = """
SELECT count(*) AS count
FROM pg_stat_activity
WHERE usename = current_user
"""

LONG_QUERIES_SQL = """
SELECT pid, (now() - query_start)::text AS duration, query
FROM pg_stat_activity
WHERE now() - query_start > '1 minute'::interval
  AND state = 'active'
"""

IDLE_IN_TRANSACTION_SQL = """
SELECT pid, (now() - query_start)::text AS duration, query
FROM pg_stat_activity
WHERE now() - query_start > '1 minute'::interval
  AND state LIKE 'idle in trans%'
"""

# http://www.databasesoup.com/2014/05/new-finding-unused-indexes-query.html
UNUSED_INDEXES_SQL = """
WITH table_scans AS (
    SELECT relid,
        tables.idx_scan + tables.seq_scan AS all_scans,
        (tables.n_tup_ins + tables.n_tup_upd + tables.n_tup_del) AS writes,
        pg_relation_size(relid) AS table_size
    FROM pg_stat_user_tables AS tables
),
indexes AS (
    SELECT idx_stat.relid, idx_stat.indexrelid,
        idx_stat.schemaname, idx_stat.relname AS tablename,
        idx_stat.indexrelname AS indexname,
        idx_stat.idx_scan,
        pg_relation_size(idx_stat.indexrelid) AS index_bytes,
        indexdef ~* 'USING btree' AS idx_is_btree
    FROM pg_stat_user_indexes AS idx_stat
        JOIN pg_index USING (indexrelid)
        JOIN pg_indexes AS indexes
            ON idx_stat.schemaname = indexes.schemaname
            AND idx_stat.relname = indexes.tablename
            AND idx_stat.indexrelname = indexes.indexname
    WHERE pg_index.indisunique = FALSE
),
index_ratios AS (
    SELECT schemaname || '.' || tablename || '::' || indexname AS index,
        idx_scan, all_scans,
        round((CASE WHEN all_scans = 0 THEN 0.0::numeric
            ELSE idx_scan::numeric / all_scans * 100 END), 2) AS index_scan_pct,
        writes,
        round((CASE WHEN writes = 0 THEN idx_scan::numeric
            ELSE idx_scan::numeric / writes END), 2) AS scans_per_write,
        pg_size_pretty(index_bytes) AS index_size,
        pg_size_pretty(table_size) AS table_size,
        idx_is_btree, index_bytes
    FROM indexes
    JOIN table_scans USING (relid)
    WHERE index_bytes > 64 * 1024 * 1024 AND table_size > 64 * 1024 * 1024
),
index_groups AS (
    SELECT 'Never Used Indexes' AS reason, *, 1 AS grp
    FROM index_ratios
    WHERE idx_scan = 0
        AND idx_is_btree
    UNION ALL
    SELECT 'Low Scans, High Writes' AS reason, *, 2 AS grp
    FROM index_ratios
    WHERE scans_per_write <= 1
        AND index_scan_pct < 10
        AND idx_scan > 0
        AND writes > 100
        AND idx_is_btree
    UNION ALL
    SELECT 'Seldom Used Large Indexes' AS reason, *, 3 AS grp
    FROM index_ratios
    WHERE index_scan_pct < 5
        AND scans_per_write > 1
        AND idx_scan > 0
        AND idx_is_btree
        AND index_bytes > 100000000
)
SELECT reason, index,
    index_scan_pct::text AS index_scan_pct,
    scans_per_write::text AS scans_per_write,
    index_size, table_size
FROM index_groups
ORDER BY grp, index_bytes DESC
"""

BLOAT_SQL = """
WITH constants AS (
    SELECT current_setting('block_size')::numeric AS bs, 23 AS hdr, 4 AS ma
), bloat_info AS (
    SELECT
        ma, bs, schemaname, tablename,
        (datawidth + (hdr + ma - (CASE WHEN hdr % ma = 0 THEN ma ELSE hdr % ma END)))::numeric AS datahdr,
        (maxfracsum * (nullhdr + ma - (CASE WHEN nullhdr % ma = 0 THEN ma ELSE nullhdr % ma END))) AS nullhdr2
    FROM (
        SELECT
            schemaname, tablename, hdr, ma, bs,
            SUM((1 - null_frac) * avg_width) AS datawidth,
            MAX(null_frac) AS maxfracsum,
            hdr + (
                SELECT 1 + count(*) / 8
                FROM pg_stats s2
                WHERE null_frac <> 0 AND s2.schemaname = s.schemaname AND s2.tablename = s.tablename
            ) AS nullhdr
        FROM pg_stats s, constants
        GROUP BY 1, 2, 3, 4, 5
    ) AS foo
), table_bloat AS (
    SELECT
        schemaname, tablename, cc.relpages, bs,
        CEIL((cc.reltuples * ((datahdr + ma -
            (CASE WHEN datahdr % ma = 0 THEN ma ELSE datahdr % ma END)) + nullhdr2 + 4)) / (bs - 20::float)) AS otta
    FROM bloat_info
    JOIN pg_class cc ON cc.relname = bloat_info.tablename
    JOIN pg_namespace nn ON cc.relnamespace = nn.oid
        AND nn.nspname = bloat_info.schemaname AND nn.nspname <> 'information_schema'
), index_bloat AS (
    SELECT
        schemaname, tablename, bs,
        COALESCE(c2.relname, '?') AS iname,
        COALESCE(c2.reltuples, 0) AS ituples,
        COALESCE(c2.relpages, 0) AS ipages,
        COALESCE(CEIL((c2.reltuples * (datahdr - 12)) / (bs - 20::float)), 0) AS iotta
    FROM bloat_info
    JOIN pg_class cc ON cc.relname = bloat_info.tablename
    JOIN pg_namespace nn ON cc.relnamespace = nn.oid
        AND nn.nspname = bloat_info.schemaname AND nn.nspname <> 'information_schema'
    JOIN pg_index i ON indrelid = cc.oid
    JOIN pg_class c2 ON c2.oid = i.indexrelid
)
SELECT type, object, bloat::int AS bloat, pg_size_pretty(raw_waste) AS waste
FROM (
    SELECT
        'table' AS type,
        schemaname || '.' || tablename AS object,
        ROUND(CASE WHEN otta = 0 THEN 0.0 ELSE table_bloat.relpages / otta::numeric END, 1) AS bloat,
        CASE WHEN relpages < otta THEN 0 ELSE (bs * (table_bloat.relpages - otta)::bigint)::bigint END AS raw_waste
    FROM table_bloat
    UNION
    SELECT
        'index' AS type,
        schemaname || '.' || tablename || '::' || iname AS object,
        ROUND(CASE WHEN iotta = 0 OR ipages = 0 THEN 0.0 ELSE ipages / iotta::numeric END, 1) AS bloat,
        CASE WHEN ipages < iotta THEN 0 ELSE (bs * (ipages - iotta))::bigint END AS raw_waste
    FROM index_bloat
) bloat_summary
WHERE raw_waste > 64 * 1024 * 1024 AND bloat > 10
ORDER BY raw_waste DESC, bloat DESC
"""

HIT_RATE_SQL = """
WITH overall_rates AS (
    SELECT
        'overall index hit rate' AS name,
        sum(idx_blks_hit) / nullif(sum(idx_blks_hit + idx_blks_read), 0) AS ratio
    FROM pg_statio_user_indexes
    UNION ALL
    SELECT
        'overall cache hit rate' AS name,
        sum(heap_blks_hit) / nullif(sum(heap_blks_hit) + sum(heap_blks_read), 0) AS ratio
    FROM pg_statio_user_tables
), table_rates AS (
    SELECT
        schemaname || '.' || relname AS name,
        idx_scan::numeric / (seq_scan + idx_scan) AS ratio
    FROM pg_stat_user_tables
    WHERE pg_total_relation_size(relid) > 64 * 1024 * 1024
        AND idx_scan > 0
), combined AS (
    SELECT * FROM overall_rates
    UNION ALL
    SELECT * FROM table_rates
)
SELECT name, ratio::float8 AS ratio
FROM combined
WHERE ratio < 0.99
"""

BLOCKING_QUERIES_SQL = """
SELECT bl.pid AS blocked_pid,
    ka.query AS blocking_statement,
    (now() - ka.query_start)::text AS blocking_duration,
    kl.pid AS blocking_pid,
    a.query AS blocked_statement,
    (now() - a.query_start)::text AS blocked_duration
FROM pg_catalog.pg_locks bl
JOIN pg_catalog.pg_stat_activity a
    ON bl.pid = a.pid
JOIN pg_catalog.pg_locks kl
    JOIN pg_catalog.pg_stat_activity ka
        ON kl.pid = ka.pid
    ON bl.transactionid = kl.transactionid AND bl.pid != kl.pid
WHERE NOT bl.granted
"""

# int4 columns whose default calls nextval(). The sequence is found through
# the dependency the default expression records on it, so it resolves
# whatever its schema or the search_path.
INT4_SEQUENCES_SQL = r"""
SELECT ns.nspname || '.' || c.relname || '(' || a.attname || ')' AS col,
    sns.nspname || '.' || s.relname AS seq
FROM pg_attribute a
JOIN pg_attrdef d ON a.attrelid = d.adrelid AND a.attnum = d.adnum
JOIN pg_class c ON c.oid = a.attrelid
JOIN pg_namespace ns ON ns.oid = c.relnamespace
JOIN pg_depend dep ON dep.classid = 'pg_attrdef'::regclass
    AND dep.objid = d.oid
    AND dep.refclassid = 'pg_class'::regclass
JOIN pg_class s ON s.oid = dep.refobjid AND s.relkind = 'S'
JOIN pg_namespace sns ON sns.oid = s.relnamespace
WHERE a.atttypid = 'int4'::regtype
    AND NOT a.attisdropped
    AND pg_get_expr(d.adbin, d.adrelid) LIKE 'nextval(%'
"""

SEQUENCE_USAGE_SQL = """
SELECT round((last_value::float / pow(2, 31))::numeric * 100, 2)::float8 AS pct
FROM {sequence}
"""
