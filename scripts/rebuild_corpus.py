import argparse
import logging

from evrec_catalog.item_repo import SupabaseItemRepo
from evrec_core.config import (
    CORPUS_TABLE_ASSOCIATIONS,
    CORPUS_TABLE_DOCUMENT_TERMS,
    ITEMS_TABLE,
    get_settings,
)
from evrec_core.supabase_client import get_supabase_client
from evrec_corpus.corpus_store import SupabaseCorpusStore
from evrec_corpus.tokenizer import configure_nltk_data
from evrec_ranking.scoring import RecommenderEngine
from evrec_user.interactions.interactions_repo import SupabaseInteractionLedger

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def main():
    parser = argparse.ArgumentParser(
        description="Full corpus rebuild: events → document term counts + term associations"
    )
    parser.add_argument("--items-table", default=ITEMS_TABLE)
    parser.add_argument("--document-terms-table", default=CORPUS_TABLE_DOCUMENT_TERMS)
    parser.add_argument("--associations-table", default=CORPUS_TABLE_ASSOCIATIONS)
    args = parser.parse_args()

    settings = get_settings()
    configure_nltk_data(settings.nltk_data_path)
    client = get_supabase_client(settings)

    store = SupabaseCorpusStore(
        client,
        document_terms_table=args.document_terms_table,
        associations_table=args.associations_table,
    )
    engine = RecommenderEngine(
        SupabaseItemRepo(client, table=args.items_table),
        store,
        SupabaseInteractionLedger(client),
    )
    engine.force_recalculate()

    logger.info("✅ Corpus holds %d distinct terms", len(store.document_terms()))


if __name__ == "__main__":
    main()
