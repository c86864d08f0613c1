"""Example usage of the typed_records library."""

from typed_records import Schema

# Describe the record layout with the field spec language
spec = "id:int32,name:varchar(ignorecase),age:int32,city:varchar"

schema = Schema.parse(spec)

print("Fields:")
for field in schema.fields:
    print(f"  {field.name}: {field.declared_type_name} -> {field.resolved_type.name}"
          + (f" ({field.option_spec})" if field.option_spec else ""))

people = schema.create_record_list(
    [
        (1, "Alice", 30, "Oslo"),
        (2, "Bob", 25, "Rome"),
        (3, "Charlie", 35, "Oslo"),
        (4, "Diana", 28, "Lima"),
        (5, "alice", 22, "Rome"),
        (6, "Frank", 45, "Oslo"),
    ]
)

by_city = schema.create_index(people, ["city"])
by_name = schema.create_index(people, ["name"])

print("\nPeople in Oslo:")
with by_city.get_record_cursor({"city": "Oslo"}) as cursor:
    for person in cursor:
        print(f"  {person['name']}, age {person['age']}")

print("\nFirst person named ALICE (case-insensitive):")
person = by_name.find_first({"name": "ALICE"})
print(f"  {person['id']}: {person['name']}")

print("\nAnyone in Paris?")
print(f"  {by_city.find_first({'city': 'Paris'})}")
