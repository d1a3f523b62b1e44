"""Walk a parent-to-child SOQL query, one lazily fetched batch at a time.

SELECT Name, Owner.Name, (SELECT LastName, Email FROM Contacts) FROM Account

Expects SF_INSTANCE_URL and SF_ACCESS_TOKEN in the environment.
"""

import logging
import os

import httpx

from sf_resultset import SObject, object_map, query
from sf_resultset.data.fields import DateTimeField, FieldFlag, IdField, TextField


class Contact(SObject):
    Id = IdField()
    LastName = TextField()
    Email = TextField()


class Account(SObject):
    Id = IdField()
    Name = TextField()
    CreatedDate = DateTimeField(FieldFlag.readonly)


def print_accounts(client: httpx.Client):
    result = query(
        client,
        "SELECT Id, Name, CreatedDate, Owner.Name, "
        "(SELECT Id, LastName, Email FROM Contacts) FROM Account",
        object_map(Account, Contact),
    )
    print(result.total_size, "Total Accounts")
    for account in result:
        # Owner is not mapped, so it is a plain SObject
        print(account.Name, account.Owner.Name, account.CreatedDate.date(), sep=" | ")
        # Contacts is itself a Result
        for contact in account.Contacts or ():
            print("   ", contact.LastName, contact.Email, sep=" | ")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    with httpx.Client(
        base_url=os.environ["SF_INSTANCE_URL"],
        headers={
            "Accept": "application/json",
            "Authorization": f"Bearer {os.environ['SF_ACCESS_TOKEN']}",
        },
    ) as client:
        print_accounts(client)
