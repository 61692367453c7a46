"""
casbin_docstore — Hello World

Policy rules live in a document collection, one flat record per rule.
The enforcer loads them through the adapter and writes back every
change while auto-save is on.
"""

import asyncio
from pathlib import Path

import casbin

from casbin_docstore import (
    AdapterConfig,
    DocumentAdapter,
    SQLiteDocumentStore,
    load_model,
    save_model_from_file,
)

HERE = Path(__file__).parent


async def main():
    # ──────────────────────────────────────
    #  1. Open the store and the adapter
    # ──────────────────────────────────────
    config = AdapterConfig(collection="hello-world")
    store = SQLiteDocumentStore(str(HERE / "hello_world.db"))

    async with DocumentAdapter(store, config) as adapter:
        # ──────────────────────────────────────
        #  2. Keep the model definition next to the rules
        # ──────────────────────────────────────
        await save_model_from_file(store, HERE / "rbac_model.conf", config)
        model = await load_model(store, config)

        # ──────────────────────────────────────
        #  3. Seed the collection from the CSV policy
        # ──────────────────────────────────────
        seed = casbin.Enforcer(str(HERE / "rbac_model.conf"), str(HERE / "rbac_policy.csv"))
        await adapter.save_policy(seed.get_model())

        # ──────────────────────────────────────
        #  4. Enforce against the stored policy
        # ──────────────────────────────────────
        e = casbin.AsyncEnforcer(model, adapter)
        await e.load_policy()

        print("=== Stored policy ===\n")
        for rule in e.get_policy():
            print(f"  p {rule}")
        for rule in e.get_grouping_policy():
            print(f"  g {rule}")

        print("\n=== Checks ===\n")
        for request in (("alice", "data2", "read"), ("bob", "data1", "read")):
            print(f"  {request}: {e.enforce(*request)}")

        # ──────────────────────────────────────
        #  5. Auto-save writes through the adapter
        # ──────────────────────────────────────
        print("\n=== Runtime management ===\n")

        await e.add_policy("bob", "data1", "read")
        await e.remove_filtered_policy(0, "data2_admin")
        await e.load_policy()
        print(f"  Policy after changes: {e.get_policy()}")
        print(f"  bob may read data1:   {e.enforce('bob', 'data1', 'read')}")


if __name__ == "__main__":
    asyncio.run(main())
